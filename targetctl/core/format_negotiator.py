"""Filtering and substitution of formats against the project's cook settings.

Texture substitution is applied per format name:

* DXT-family names are kept when DXT cooking is enabled. Otherwise ``DXT1``
  becomes ``ETC2_RGB`` and every other DXT variant ``ETC2_RGBA`` when ETC2
  cooking is enabled.
* BC-family names are kept when BC cooking is enabled. Otherwise they become
  ``ETC2_RGB`` when ETC2 cooking is enabled.
* With neither the family nor ETC2 enabled, a format resolved for a specific
  texture falls back to ``BGRA8`` so the texture always has one usable
  format, while the flat list of every format simply drops the entry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from targetctl.core.format_catalog import ADPCM, OGG, OPUS
from targetctl.core.format_family import FormatFamily, classify
from targetctl.core.model import TargetSettings

LOGGER = logging.getLogger(__name__)

ETC2_RGB = "ETC2_RGB"
ETC2_RGBA = "ETC2_RGBA"
BGRA8 = "BGRA8"


def filter_targeted_shader_formats(requested: Iterable[str], possible: Iterable[str]) -> list[str]:
    possible_set = set(possible)
    formats: list[str] = []
    for name in requested:
        if name not in possible_set:
            LOGGER.debug("Dropping unsupported targeted shader format '%s'", name)
            continue
        if name not in formats:
            formats.append(name)
    return formats


def substitute_texture_format(name: str, settings: TargetSettings, *, drop_unavailable: bool) -> str | None:
    """Return the format to cook instead of ``name``, or None when it is dropped."""
    family = classify(name)
    if family is FormatFamily.DXT and not settings.cook_dxt:
        if settings.cook_etc2:
            return ETC2_RGB if name == "DXT1" else ETC2_RGBA
        return None if drop_unavailable else BGRA8
    if family is FormatFamily.BC and not settings.cook_bc:
        if settings.cook_etc2:
            return ETC2_RGB
        return None if drop_unavailable else BGRA8
    return name


def negotiate_layer_formats(layers: list[str], settings: TargetSettings) -> list[str]:
    negotiated: list[str] = []
    for name in layers:
        substitute = substitute_texture_format(name, settings, drop_unavailable=False)
        if substitute != name:
            LOGGER.debug("Substituted texture format %s -> %s", name, substitute)
        negotiated.append(substitute or BGRA8)
    return negotiated


def negotiate_all_texture_formats(names: Iterable[str], settings: TargetSettings) -> list[str]:
    negotiated: list[str] = []
    for name in names:
        substitute = substitute_texture_format(name, settings, drop_unavailable=True)
        if substitute is None:
            LOGGER.debug("Dropped texture format %s from the full format list", name)
            continue
        if substitute not in negotiated:
            negotiated.append(substitute)
    return negotiated


def select_wave_format(is_seekable_streaming: bool, is_streaming: bool) -> str:
    if is_seekable_streaming:
        return ADPCM
    if is_streaming:
        return OPUS
    return OGG


def all_wave_formats() -> list[str]:
    return [ADPCM, OGG, OPUS]
