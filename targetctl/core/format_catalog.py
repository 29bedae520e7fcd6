"""Formats a target variant could produce, before any project configuration applies."""

from __future__ import annotations

from typing import Protocol

from targetctl.core.model import TargetProperties, TextureAsset

SF_VULKAN_SM5 = "SF_VULKAN_SM5"
SF_VULKAN_ES31 = "SF_VULKAN_ES31"
GLSL_150_ES31 = "GLSL_150_ES31"

ENCODED_HDR = "EncodedHDR"
FULL_HDR = "FullHDR"

ADPCM = "ADPCM"
OGG = "OGG"
OPUS = "OPUS"

_ES31_SHADER_FORMATS = frozenset({SF_VULKAN_ES31, GLSL_150_ES31})


def possible_shader_formats(props: TargetProperties) -> tuple[str, ...]:
    # no shaders needed for a dedicated server
    if props.is_server_only:
        return ()
    return (SF_VULKAN_SM5, SF_VULKAN_ES31)


def requires_encoded_hdr(targeted_shader_formats: tuple[str, ...] | list[str]) -> bool:
    return any(name in _ES31_SHADER_FORMATS for name in targeted_shader_formats)


def reflection_capture_formats(requires_encoded: bool) -> list[str]:
    formats = [ENCODED_HDR] if requires_encoded else []
    formats.append(FULL_HDR)
    return formats


class DefaultFormatResolver(Protocol):
    def texture_formats_per_layer(self, texture: TextureAsset) -> list[str]:
        """Return the default format name for each layer of ``texture``."""

    def all_texture_formats(self) -> list[str]:
        """Return every format name the resolver can produce."""


_COMPRESSION_FORMATS = {
    "Normalmap": "BC5",
    "Alpha": "BC4",
    "Grayscale": "G8",
    "Displacementmap": "G16",
    "HDR": "RGBA16F",
    "HDR_Compressed": "BC6H",
    "BC7": "BC7",
    "VectorDisplacementmap": "BGRA8",
    "UserInterface2D": "BGRA8",
    "EditorIcon": "BGRA8",
}

ALL_DEFAULT_TEXTURE_FORMATS = (
    "DXT1",
    "DXT3",
    "DXT5",
    "AutoDXT",
    "BC4",
    "BC5",
    "BC6H",
    "BC7",
    "BGRA8",
    "G8",
    "G16",
    "RGBA16F",
)


class StaticFormatResolver:
    """Maps a texture's compression setting to a fixed default format."""

    def texture_formats_per_layer(self, texture: TextureAsset) -> list[str]:
        name = _COMPRESSION_FORMATS.get(texture.compression)
        if name is None:
            name = "DXT5" if texture.has_alpha else "DXT1"
        return [name] * max(texture.layer_count, 1)

    def all_texture_formats(self) -> list[str]:
        return list(ALL_DEFAULT_TEXTURE_FORMATS)
