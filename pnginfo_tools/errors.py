"""
Exceptions raised while decoding PNG metadata
"""


class FormatError(ValueError):
    """The buffer does not start with the PNG signature."""


class ChunkDecodeError(Exception):
    """
    A single chunk could not be interpreted.

    Raised by the per-kind decoders and caught at the dispatch boundary;
    it never reaches callers of the decoder.
    """
