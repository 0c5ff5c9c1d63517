"""
Fallible decompression step for compressed text chunks
"""
from dataclasses import dataclass
from typing import Callable, Optional
import zlib

from pnginfo_tools.settings import DEFAULT_MAX_TEXT_SIZE

INFLATE_PLACEHOLDER = '[Compressed data - decompression not supported]'

# (compressed bytes, output ceiling) -> decompressed bytes
Inflater = Callable[[bytes, int], bytes]


@dataclass(frozen=True)
class InflateResult:
    """Outcome of one decompression attempt."""
    data: Optional[bytes] = None
    error: Optional[str] = None
    unavailable: bool = False

    @property
    def ok(self) -> bool:
        return self.data is not None


def _inflate_stream(data: bytes, wbits: int, max_size: int) -> bytes:
    decompressor = zlib.decompressobj(wbits)
    output = decompressor.decompress(data, max_size + 1)
    if len(output) > max_size:
        raise ValueError(f"Inflated text exceeds {max_size} bytes")
    if not decompressor.eof:
        raise zlib.error("Compressed stream is truncated")
    return output


def zlib_inflate(data: bytes, max_size: int = DEFAULT_MAX_TEXT_SIZE) -> bytes:
    """
    Inflate a deflate stream.

    PNG writers wrap the stream in a zlib header; bare raw-deflate streams
    are accepted as a fallback.

    Args:
        data: Compressed bytes.
        max_size: Largest output accepted.

    Returns:
        The decompressed bytes.
    """
    try:
        return _inflate_stream(data, zlib.MAX_WBITS, max_size)
    except zlib.error:
        return _inflate_stream(data, -zlib.MAX_WBITS, max_size)


def inflate(data: bytes, inflater: Optional[Inflater] = zlib_inflate,
            max_size: int = DEFAULT_MAX_TEXT_SIZE) -> InflateResult:
    """
    Run the decompression step without letting it raise.

    An inflater of None stands for a runtime with no decompression support.
    """
    if inflater is None:
        return InflateResult(unavailable=True)
    try:
        return InflateResult(data=inflater(data, max_size))
    except Exception as e:
        return InflateResult(error=str(e) or type(e).__name__)
