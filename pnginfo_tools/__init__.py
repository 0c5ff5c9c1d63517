"""
PNG Info Tools - decode dimensions, text annotations and chunk layout from PNG files
"""
from pathlib import Path
from typing import Dict, List, Optional, Union, Any
import asyncio
import functools

__version__ = "0.1.0"

from pnginfo_tools.chunk_types import PNG_SIGNATURE, ChunkKind, ColorType, PhysicalUnit
from pnginfo_tools.errors import FormatError, ChunkDecodeError
from pnginfo_tools.models import (
    RawChunkDescriptor,
    PhysicalDimensions,
    TechnicalInfo,
    ChunkDiagnostic,
    DecodedMetadata,
)
from pnginfo_tools.settings import DecoderSettings
from pnginfo_tools.inflate import INFLATE_PLACEHOLDER, InflateResult, Inflater, inflate, zlib_inflate
from pnginfo_tools.decoder import ChunkStreamDecoder, decode
from pnginfo_tools.batch_operations import BatchDecoder
from pnginfo_tools.png_inspector import PNGInfoInspector


async def decode_async(buffer: bytes, settings: Optional[DecoderSettings] = None,
                       inflater: Optional[Inflater] = zlib_inflate) -> DecodedMetadata:
    """
    Decode a PNG buffer without blocking the event loop.

    Args:
        buffer: Raw bytes of the file.
        settings: Decoder settings, read from the environment if None.
        inflater: Decompression function for zTXt chunks.

    Returns:
        Decoded metadata for the buffer.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(decode, buffer, settings, inflater))


def read(filepath: Union[str, Path]) -> DecodedMetadata:
    """
    Decode metadata from a PNG file.

    Args:
        filepath: Path to the PNG file.

    Returns:
        Decoded metadata.
    """
    path = Path(filepath) if isinstance(filepath, str) else filepath
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return decode(path.read_bytes())


def read_text(filepath: Union[str, Path]) -> Dict[str, str]:
    """Text annotations of a PNG file."""
    return read(filepath).text_chunks


def read_many(filepaths: List[Union[str, Path]], workers: Optional[int] = None) -> BatchDecoder:
    """
    Decode several PNG files concurrently.

    Args:
        filepaths: Paths to decode.
        workers: Number of worker threads.

    Returns:
        The finished BatchDecoder; see its ``results`` and ``errors``.
    """
    with BatchDecoder(workers=workers) as batch:
        batch.decode_files(filepaths)
    return batch


def inspect(filepath: Union[str, Path], detailed: bool = False) -> Dict[str, Any]:
    """
    Inspect a PNG file, including any AI-generation parameters.

    Args:
        filepath: Path to the PNG file.
        detailed: If True, also print a summary.

    Returns:
        Dictionary with inspection results.
    """
    inspector = PNGInfoInspector(filepath)
    if detailed:
        inspector.print_detailed_summary()
    return inspector.metadata


__all__ = [
    # Core classes
    'ChunkStreamDecoder',
    'BatchDecoder',
    'PNGInfoInspector',
    'DecoderSettings',

    # Records
    'RawChunkDescriptor', 'PhysicalDimensions', 'TechnicalInfo',
    'ChunkDiagnostic', 'DecodedMetadata',

    # Enumerations and constants
    'PNG_SIGNATURE', 'ChunkKind', 'ColorType', 'PhysicalUnit', 'INFLATE_PLACEHOLDER',

    # Errors
    'FormatError', 'ChunkDecodeError',

    # Decompression
    'InflateResult', 'inflate', 'zlib_inflate',

    # Simplified API functions
    'decode', 'decode_async', 'read', 'read_text', 'read_many', 'inspect',
]
