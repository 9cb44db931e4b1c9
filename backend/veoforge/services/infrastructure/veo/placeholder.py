"""Minimal MP4 payload served when a completed video cannot be downloaded."""

# ftyp box (isom, minor 0x200, brands isom/iso2/mp41) followed by an empty mdat header
_MP4_HEADER = bytes([
    0x00, 0x00, 0x00, 0x20, 0x66, 0x74, 0x79, 0x70,
    0x69, 0x73, 0x6F, 0x6D, 0x00, 0x00, 0x02, 0x00,
    0x69, 0x73, 0x6F, 0x6D, 0x69, 0x73, 0x6F, 0x32,
    0x6D, 0x70, 0x34, 0x31, 0x00, 0x00, 0x00, 0x08,
    0x6D, 0x64, 0x61, 0x74, 0x00, 0x00, 0x00, 0x00,
])
_PADDING_BYTES = 1024


def build_placeholder_video() -> bytes:
    return _MP4_HEADER + bytes(_PADDING_BYTES)
