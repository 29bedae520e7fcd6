"""Synchronous publish/subscribe point for device discovery and loss."""

from __future__ import annotations

import itertools
from collections.abc import Callable

from targetctl.core.model import Device, DeviceEvent

DeviceCallback = Callable[[Device], None]


class EventHub:
    """Delivers events on the publishing thread, in subscription order."""

    def __init__(self) -> None:
        self._handles = itertools.count(1)
        self._subscribers: dict[DeviceEvent, dict[int, DeviceCallback]] = {
            kind: {} for kind in DeviceEvent
        }

    def subscribe(self, kind: DeviceEvent, callback: DeviceCallback) -> int:
        handle = next(self._handles)
        self._subscribers[kind][handle] = callback
        return handle

    def unsubscribe(self, kind: DeviceEvent, handle: int) -> bool:
        return self._subscribers[kind].pop(handle, None) is not None

    def publish(self, kind: DeviceEvent, device: Device) -> None:
        for callback in list(self._subscribers[kind].values()):
            callback(device)
