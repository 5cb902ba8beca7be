import logging

import attr

from pngsm import exceptions as exc
from pngsm import models
from pngsm.decoder import PNG_SIGNATURE, PNGChunkReader


logger = logging.getLogger(__name__)


@attr.attributes
class PNG:
    """
    A PNG stream: the signature followed by an ordered list of chunks.

    Chunk order is kept exactly as given and is the order used when
    serializing.
    """
    _chunks = attr.attr(converter=list, default=attr.Factory(list))

    @classmethod
    def from_chunks(cls, chunks):
        return cls(chunks=chunks)

    @classmethod
    def from_bytes(cls, buffer):
        """
        Parse a complete PNG byte buffer.

        Any error from the signature or from a single chunk aborts the
        whole parse.
        """
        return cls(chunks=PNGChunkReader(buffer))

    @property
    def chunks(self):
        return tuple(self._chunks)

    def append_chunk(self, chunk):
        self._chunks.append(chunk)

    def chunks_by_type(self, chunk_type):
        """
        Return all chunks with the type code string ``chunk_type``, in
        stream order.

        :raises exceptions.InvalidChunkType:
            if ``chunk_type`` is not a valid type code string
        """
        wanted = models.ChunkType.from_str(chunk_type)
        return [c for c in self._chunks if c.chunk_type == wanted]

    def chunk_by_type(self, chunk_type):
        """
        Return the first chunk with the type code string ``chunk_type``,
        or ``None`` if there is no such chunk or the string is not a
        type code at all.
        """
        try:
            matches = self.chunks_by_type(chunk_type)
        except exc.InvalidChunkType:
            return None
        return matches[0] if matches else None

    def remove_chunk(self, chunk_type, occurrence=0):
        """
        Remove and return a chunk with the type code string
        ``chunk_type``. Chunks after it keep their relative order.

        :param occurrence:
            Which of the matching chunks to remove, counting from 0
            in stream order. Only one chunk is removed per call.
        :raises exceptions.InvalidChunkType:
            if ``chunk_type`` is not a valid type code string
        :raises exceptions.ChunkNotFound:
            if there is no such chunk
        """
        wanted = models.ChunkType.from_str(chunk_type)
        positions = [
            index for index, chunk in enumerate(self._chunks)
            if chunk.chunk_type == wanted
        ]
        if not 0 <= occurrence < len(positions):
            raise exc.ChunkNotFound(chunk_type)
        chunk = self._chunks.pop(positions[occurrence])
        logger.debug("Removed %r", chunk)
        return chunk

    def to_bytes(self):
        return PNG_SIGNATURE + b''.join(c.to_bytes() for c in self._chunks)

    __bytes__ = to_bytes
