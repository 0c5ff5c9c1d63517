"""
PNG chunk-stream decoder

Walks the chunk stream of an in-memory PNG buffer and gathers header
parameters, text annotations and a descriptor for every chunk seen. Only a
bad signature is fatal; a chunk that cannot be interpreted is reported as a
diagnostic and the walk carries on.
"""
from typing import Iterator, Optional, Tuple, Union
import logging
import struct
import zlib

from pnginfo_tools.chunk_decoders import ChunkContext, get_decoder
from pnginfo_tools.chunk_types import ChunkKind, PNG_SIGNATURE
from pnginfo_tools.errors import FormatError
from pnginfo_tools.inflate import Inflater, zlib_inflate
from pnginfo_tools.models import ChunkDiagnostic, DecodedMetadata, RawChunkDescriptor
from pnginfo_tools.settings import DecoderSettings

logger = logging.getLogger("pnginfo_decoder")

BufferLike = Union[bytes, bytearray, memoryview]

# (offset, declared length, tag, payload)
RawChunk = Tuple[int, int, str, bytes]


class ChunkStreamDecoder:
    """
    Decoder for PNG metadata held in memory.

    A decoder only carries configuration, so one instance can serve any
    number of threads; every call to decode() builds its own result.

    Example:
        decoder = ChunkStreamDecoder()
        metadata = decoder.decode(Path("image.png").read_bytes())
        print(metadata.text_chunks.get("parameters"))
    """

    SIGNATURE = PNG_SIGNATURE
    CHUNK_HEADER_SIZE = 8  # length + kind
    CRC_SIZE = 4

    def __init__(self, settings: Optional[DecoderSettings] = None,
                 inflater: Optional[Inflater] = zlib_inflate):
        """
        Initialise the decoder.

        Args:
            settings: Decoder settings. Read from the environment if None.
            inflater: Decompression function for zTXt chunks. None means no
                      decompression is available and compressed text is
                      replaced by a placeholder.
        """
        self.settings = settings or DecoderSettings.from_env()
        self.inflater = inflater

    def decode(self, buffer: BufferLike) -> DecodedMetadata:
        """
        Decode one PNG buffer.

        Args:
            buffer: Raw bytes of the file.

        Returns:
            A fresh DecodedMetadata record.

        Raises:
            FormatError: If the buffer does not start with the PNG signature.
        """
        data = bytes(buffer)
        self._verify_signature(data)

        metadata = DecodedMetadata()
        context = ChunkContext(inflater=self.inflater,
                               max_text_size=self.settings.max_text_size)

        for offset, length, tag, payload in self.iter_chunks(data):
            descriptor = RawChunkDescriptor(kind=tag, length=length, offset=offset)
            metadata.raw_chunks.append(descriptor)

            if len(payload) < length:
                self._report(metadata, descriptor,
                             f"payload truncated: {len(payload)} of {length} bytes present")
                continue

            if self.settings.verify_crc:
                self._check_crc(data, descriptor, payload, metadata)

            decoder = get_decoder(tag)
            if decoder is None:
                logger.debug(f"Recorded {tag} chunk at {descriptor.hex_offset}")
                continue

            try:
                decoder(payload, metadata, context)
            except Exception as e:
                self._report(metadata, descriptor, str(e) or type(e).__name__)

        return metadata

    def iter_chunks(self, data: bytes) -> Iterator[RawChunk]:
        """
        Yield the chunks of a signed buffer in file order.

        The walk stops after IEND or once fewer than nine bytes remain. A
        payload running past the end of the buffer is yielded short.
        """
        cursor = len(self.SIGNATURE)
        limit = len(data) - self.CHUNK_HEADER_SIZE

        while cursor < limit:
            length, = struct.unpack_from('>I', data, cursor)
            tag = data[cursor + 4:cursor + 8].decode('latin-1')
            payload_start = cursor + self.CHUNK_HEADER_SIZE
            payload = data[payload_start:payload_start + length]

            yield cursor, length, tag, payload

            cursor += self.CHUNK_HEADER_SIZE + length + self.CRC_SIZE
            if tag == ChunkKind.IEND.value:
                break

    def _verify_signature(self, data: bytes) -> None:
        if len(data) < len(self.SIGNATURE) or data[:len(self.SIGNATURE)] != self.SIGNATURE:
            raise FormatError("Invalid PNG signature")

    def _check_crc(self, data: bytes, descriptor: RawChunkDescriptor, payload: bytes,
                   metadata: DecodedMetadata) -> None:
        crc_start = descriptor.offset + self.CHUNK_HEADER_SIZE + descriptor.length
        crc_bytes = data[crc_start:crc_start + self.CRC_SIZE]
        if len(crc_bytes) < self.CRC_SIZE:
            self._report(metadata, descriptor, "CRC missing")
            return

        stored, = struct.unpack('>I', crc_bytes)
        computed = zlib.crc32(descriptor.kind.encode('latin-1') + payload) & 0xFFFFFFFF
        if stored != computed:
            self._report(metadata, descriptor,
                         f"CRC mismatch: stored {stored:08X}, computed {computed:08X}")

    @staticmethod
    def _report(metadata: DecodedMetadata, descriptor: RawChunkDescriptor, message: str) -> None:
        logger.warning(f"{descriptor.kind} chunk at {descriptor.hex_offset}: {message}")
        metadata.diagnostics.append(
            ChunkDiagnostic(kind=descriptor.kind, offset=descriptor.offset, message=message))


def decode(buffer: BufferLike, settings: Optional[DecoderSettings] = None,
           inflater: Optional[Inflater] = zlib_inflate) -> DecodedMetadata:
    """Decode one PNG buffer with a throwaway decoder."""
    return ChunkStreamDecoder(settings, inflater).decode(buffer)
