"""
Per-kind chunk decoders

Each decoder takes the chunk payload, the metadata record being built and
the decode context. A decoder that finds nothing usable simply returns;
a malformed payload raises and is reported by the walk as a diagnostic.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
import logging
import struct

from pnginfo_tools.chunk_types import ChunkKind, PhysicalUnit
from pnginfo_tools.errors import ChunkDecodeError
from pnginfo_tools.inflate import Inflater, INFLATE_PLACEHOLDER, inflate, zlib_inflate
from pnginfo_tools.models import DecodedMetadata, PhysicalDimensions
from pnginfo_tools.settings import DEFAULT_MAX_TEXT_SIZE

logger = logging.getLogger("pnginfo_decoder")

IHDR_FORMAT = struct.Struct('>IIBBBBB')
PHYS_FORMAT = struct.Struct('>IIB')
TIME_FORMAT = struct.Struct('>HBBBBB')

DEFLATE_METHOD = 0


@dataclass(frozen=True)
class ChunkContext:
    inflater: Optional[Inflater] = zlib_inflate
    max_text_size: int = DEFAULT_MAX_TEXT_SIZE


def parse_text_chunk(payload: bytes) -> Optional[Tuple[str, str]]:
    """Split a tEXt payload into (keyword, text), or None without a separator."""
    try:
        keyword, text = payload.split(b'\0', 1)
    except ValueError:
        return None
    return keyword.decode('latin-1'), text.decode('latin-1')


def parse_itext_chunk(payload: bytes) -> Optional[Tuple[str, str]]:
    """
    Extract (keyword, text) from an iTXt payload.

    Layout: keyword NUL flag method language NUL translated-keyword NUL text.
    The text is UTF-8 decoded as stored; the compression flag is not acted on.
    """
    keyword_end = payload.find(b'\0')
    if keyword_end == -1:
        return None
    keyword = payload[:keyword_end].decode('latin-1')

    flags_start = keyword_end + 1
    if flags_start < len(payload) and payload[flags_start]:
        logger.debug(f"iTXt '{keyword}' is flagged as compressed; decoding text as stored")

    language_end = payload.find(b'\0', flags_start + 2)
    if language_end == -1:
        return None
    translated_end = payload.find(b'\0', language_end + 1)
    if translated_end == -1:
        return None

    text = payload[translated_end + 1:].decode('utf-8', errors='replace')
    return keyword, text


def parse_ztext_chunk(payload: bytes, context: ChunkContext) -> Optional[Tuple[str, str]]:
    """
    Extract (keyword, text) from a zTXt payload, inflating the text.

    Returns None when the separator is missing or the compression method is
    not deflate. Raises ChunkDecodeError when the stream cannot be inflated.
    """
    keyword_end = payload.find(b'\0')
    if keyword_end == -1:
        return None
    keyword = payload[:keyword_end].decode('latin-1')

    method_index = keyword_end + 1
    if method_index >= len(payload) or payload[method_index] != DEFLATE_METHOD:
        return None

    result = inflate(payload[method_index + 1:], context.inflater, context.max_text_size)
    if result.unavailable:
        return keyword, INFLATE_PLACEHOLDER
    if not result.ok:
        raise ChunkDecodeError(f"zTXt '{keyword}' could not be inflated: {result.error}")
    return keyword, result.data.decode('latin-1')


def decode_header(payload: bytes, metadata: DecodedMetadata, context: ChunkContext) -> None:
    if len(payload) < IHDR_FORMAT.size:
        raise ChunkDecodeError(
            f"IHDR payload too short: {len(payload)} bytes, expected {IHDR_FORMAT.size}")
    info = metadata.technical_info
    (info.width, info.height, info.bit_depth, info.color_type,
     info.compression, info.filter, info.interlace) = IHDR_FORMAT.unpack_from(payload)


def decode_text(payload: bytes, metadata: DecodedMetadata, context: ChunkContext) -> None:
    entry = parse_text_chunk(payload)
    if entry:
        metadata.text_chunks[entry[0]] = entry[1]


def decode_international_text(payload: bytes, metadata: DecodedMetadata,
                              context: ChunkContext) -> None:
    entry = parse_itext_chunk(payload)
    if entry:
        metadata.text_chunks[entry[0]] = entry[1]


def decode_compressed_text(payload: bytes, metadata: DecodedMetadata,
                           context: ChunkContext) -> None:
    entry = parse_ztext_chunk(payload, context)
    if entry:
        metadata.text_chunks[entry[0]] = entry[1]


def decode_physical_dimensions(payload: bytes, metadata: DecodedMetadata,
                               context: ChunkContext) -> None:
    if len(payload) < PHYS_FORMAT.size:
        return
    per_x, per_y, specifier = PHYS_FORMAT.unpack_from(payload)
    metadata.technical_info.physical_dimensions = PhysicalDimensions(
        pixels_per_unit_x=per_x,
        pixels_per_unit_y=per_y,
        unit=PhysicalUnit.from_specifier(specifier).value,
    )


def decode_timestamp(payload: bytes, metadata: DecodedMetadata, context: ChunkContext) -> None:
    if len(payload) < TIME_FORMAT.size:
        return
    year, month, day, hour, minute, second = TIME_FORMAT.unpack_from(payload)
    metadata.technical_info.last_modified = (
        f"{year}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:{second:02d}")


def decode_end(payload: bytes, metadata: DecodedMetadata, context: ChunkContext) -> None:
    """IEND carries no data; the walk stops after it."""


ChunkDecoder = Callable[[bytes, DecodedMetadata, ChunkContext], None]

CHUNK_DECODERS: Dict[ChunkKind, ChunkDecoder] = {
    ChunkKind.IHDR: decode_header,
    ChunkKind.TEXT: decode_text,
    ChunkKind.ITXT: decode_international_text,
    ChunkKind.ZTXT: decode_compressed_text,
    ChunkKind.PHYS: decode_physical_dimensions,
    ChunkKind.TIME: decode_timestamp,
    ChunkKind.IEND: decode_end,
}


def get_decoder(tag: str) -> Optional[ChunkDecoder]:
    """Decoder for a raw 4-character tag; None for kinds that are only recorded."""
    kind = ChunkKind.from_tag(tag)
    if kind is None:
        return None
    return CHUNK_DECODERS[kind]
