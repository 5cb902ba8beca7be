import logging
import struct

from pngsm import exceptions as exc
from pngsm import models


logger = logging.getLogger(__name__)


PNG_SIGNATURE = bytes([
    # High bit set to detect non-8-bit-clean transmission
    0x89,
    # ASCII letters PNG
    0x50, 0x4E, 0x47,
    # DOS line ending (CRLF)
    0x0D, 0x0A,
    # end-of-file charater
    0x1A,
    # Unix line ending (LF)
    0x0A
])


class PNGChunkReader(object):
    """
    Produces chunks from an in-memory PNG byte buffer.

    Responsible for validating the low-level structure of the stream:

    -   Signature (PNG magic number)
    -   Chunk spans fitting inside the buffer
    -   Valid chunk code
    -   CRC32 checksum

    Chunk ordering is not checked.

    :ivar position: Number of bytes of the buffer consumed so far
    :type position: int
    """
    def __init__(self, buffer):
        self._buffer = memoryview(buffer)
        self.position = 0

    def __iter__(self):
        """
        Validate the signature, then yield one :class:`models.Chunk`
        per chunk in the buffer, in order.
        """
        self._validate_signature()
        while self.position < len(self._buffer):
            yield self._get_chunk()
        logger.debug("Reached end of buffer at byte %d", self.position)

    def _validate_signature(self):
        if self.position != 0:
            raise exc.DecodeError("Signature must be read first")
        header = self._buffer[:len(PNG_SIGNATURE)].tobytes()
        if header != PNG_SIGNATURE:
            raise exc.SignatureMismatch(
                "Expected {expected!r}, got {actual!r}".format(
                    expected=PNG_SIGNATURE,
                    actual=header
                )
            )
        self.position = len(PNG_SIGNATURE)

    def _get_chunk(self):
        """
        Slice the next chunk's span out of the buffer, parse it, and
        advance past it.

        :rtype: :class:`models.Chunk`
        """
        start_position = self.position
        remaining = len(self._buffer) - start_position
        if remaining < models.CHUNK_METADATA_SIZE:
            fmt = (
                "{remaining} trailing bytes at byte {position}, too few "
                "for a chunk"
            )
            raise exc.ChunkTooShort(fmt.format(
                remaining=remaining,
                position=start_position,
            ))
        [length] = struct.unpack_from('>I', self._buffer, start_position)
        end_position = start_position + models.CHUNK_METADATA_SIZE + length
        chunk = models.Chunk.from_bytes(
            self._buffer[start_position:end_position])
        self.position = end_position
        logger.debug(
            "Read chunk %s (%d data bytes) at byte %d",
            chunk.chunk_type, chunk.length, start_position,
        )
        return chunk
