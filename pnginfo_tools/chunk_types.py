"""
PNG chunk kinds and enumerated header values
"""
from enum import Enum
from typing import Optional

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


class ChunkKind(str, Enum):
    """Chunk kinds the decoder knows how to interpret."""
    IHDR = 'IHDR'
    TEXT = 'tEXt'
    ITXT = 'iTXt'
    ZTXT = 'zTXt'
    PHYS = 'pHYs'
    TIME = 'tIME'
    IEND = 'IEND'

    @classmethod
    def from_tag(cls, tag: str) -> Optional['ChunkKind']:
        """Return the matching kind, or None for a tag we do not interpret."""
        try:
            return cls(tag)
        except ValueError:
            return None


class ColorType(int, Enum):
    GRAYSCALE = 0
    TRUECOLOR = 2
    INDEXED = 3
    GRAYSCALE_ALPHA = 4
    TRUECOLOR_ALPHA = 6

    @property
    def label(self) -> str:
        return _COLOR_TYPE_LABELS[self]

    @classmethod
    def describe(cls, value: Optional[int]) -> str:
        """Human readable name for a raw colour type value."""
        try:
            return cls(value).label
        except ValueError:
            return 'Unknown'


_COLOR_TYPE_LABELS = {
    ColorType.GRAYSCALE: 'Grayscale',
    ColorType.TRUECOLOR: 'Truecolor',
    ColorType.INDEXED: 'Indexed',
    ColorType.GRAYSCALE_ALPHA: 'Grayscale + Alpha',
    ColorType.TRUECOLOR_ALPHA: 'Truecolor + Alpha',
}


class PhysicalUnit(str, Enum):
    METERS = 'meters'
    UNKNOWN = 'unknown'

    @classmethod
    def from_specifier(cls, specifier: int) -> 'PhysicalUnit':
        return cls.METERS if specifier == 1 else cls.UNKNOWN
