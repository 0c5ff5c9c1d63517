"""
Decoded PNG metadata records
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any

from pnginfo_tools.chunk_types import ColorType


@dataclass(frozen=True)
class RawChunkDescriptor:
    kind: str
    length: int
    offset: int  # Offset in buffer where chunk begins

    @property
    def hex_offset(self) -> str:
        return f"0x{self.offset:X}"


@dataclass(frozen=True)
class PhysicalDimensions:
    pixels_per_unit_x: int
    pixels_per_unit_y: int
    unit: str


@dataclass
class TechnicalInfo:
    """
    Header-level parameters gathered from IHDR, pHYs and tIME.

    Every field stays None until its source chunk has been seen. A repeated
    chunk overwrites the earlier values.
    """
    width: Optional[int] = None
    height: Optional[int] = None
    bit_depth: Optional[int] = None
    color_type: Optional[int] = None
    compression: Optional[int] = None
    filter: Optional[int] = None
    interlace: Optional[int] = None
    physical_dimensions: Optional[PhysicalDimensions] = None
    last_modified: Optional[str] = None

    @property
    def color_type_name(self) -> str:
        return ColorType.describe(self.color_type)

    @property
    def is_interlaced(self) -> Optional[bool]:
        if self.interlace is None:
            return None
        return self.interlace != 0

    def to_dict(self) -> Dict[str, Any]:
        """Populated fields only."""
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class ChunkDiagnostic:
    """A recoverable failure while interpreting one chunk."""
    kind: str
    offset: int
    message: str


@dataclass
class DecodedMetadata:
    """Everything extracted from one PNG buffer."""
    text_chunks: Dict[str, str] = field(default_factory=dict)
    technical_info: TechnicalInfo = field(default_factory=TechnicalInfo)
    raw_chunks: List[RawChunkDescriptor] = field(default_factory=list)
    diagnostics: List[ChunkDiagnostic] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'text_chunks': dict(self.text_chunks),
            'technical_info': self.technical_info.to_dict(),
            'raw_chunks': [asdict(chunk) for chunk in self.raw_chunks],
            'diagnostics': [asdict(diagnostic) for diagnostic in self.diagnostics],
        }
