"""
Operations for hiding text messages in chunks of PNG files on disk.
"""
import logging

from pngsm import exceptions as exc
from pngsm import models
from pngsm.container import PNG


logger = logging.getLogger(__name__)


def read_png(path):
    with open(path, 'rb') as pngfile:
        return PNG.from_bytes(pngfile.read())


def write_png(path, png):
    with open(path, 'wb') as pngfile:
        pngfile.write(png.to_bytes())


def encode(path, chunk_type, message):
    """
    Append a chunk holding ``message`` to the PNG at ``path``.

    :raises exceptions.InvalidChunkType:
        if ``chunk_type`` is malformed or may not be written to a PNG
        stream
    :return: The new chunk
    """
    png = read_png(path)
    new_type = models.ChunkType.from_str(chunk_type)
    if not new_type.valid:
        raise exc.InvalidChunkType(
            "Chunk type {code} is invalid, the third character must be "
            "uppercase".format(code=new_type)
        )
    chunk = models.Chunk(new_type, message.encode('utf-8'))
    png.append_chunk(chunk)
    write_png(path, png)
    logger.debug("Appended %r to %s", chunk, path)
    return chunk


def decode(path, chunk_type):
    """
    Return the messages of all chunks of ``chunk_type`` in the PNG at
    ``path``, in stream order.
    """
    png = read_png(path)
    return [c.data_as_string() for c in png.chunks_by_type(chunk_type)]


def remove(path, chunk_type, index=None, prompt=input):
    """
    Remove one chunk of ``chunk_type`` from the PNG at ``path``.

    If several chunks match and no ``index`` is given, the user is
    asked which one to remove through ``prompt``; an empty answer
    removes the first.

    :raises exceptions.ChunkNotFound:
        if there is no such chunk, or ``index`` is out of range
    :return: The removed chunk
    """
    png = read_png(path)
    candidates = png.chunks_by_type(chunk_type)
    if index is None:
        index = 0
        if len(candidates) > 1:
            index = _choose_chunk(candidates, prompt)
    chunk = png.remove_chunk(chunk_type, occurrence=index)
    write_png(path, png)
    logger.debug("Removed chunk %d of type %s from %s", index, chunk_type, path)
    return chunk


def _choose_chunk(candidates, prompt):
    lines = []
    for index, chunk in enumerate(candidates):
        try:
            message = chunk.data_as_string()
        except exc.UnreadablePayload:
            message = '<{length} unreadable bytes>'.format(length=chunk.length)
        lines.append('chunk : {index}\nmessage : {message}'.format(
            index=index,
            message=message,
        ))
    lines.append('choose chunk to remove (0-{last}, default = 0) : '.format(
        last=len(candidates) - 1,
    ))
    answer = prompt('\n'.join(lines)).strip()
    if not answer:
        return 0
    try:
        return int(answer)
    except ValueError:
        raise exc.ChunkNotFound(
            '{type} at index {answer!r}'.format(
                type=candidates[0].chunk_type,
                answer=answer,
            )
        ) from None


def print_chunks(path):
    """
    Return ``(chunk_type, message)`` pairs for every chunk in the PNG
    at ``path`` whose data is readable text.
    """
    png = read_png(path)
    messages = []
    for chunk in png.chunks:
        try:
            messages.append((chunk.chunk_type, chunk.data_as_string()))
        except exc.UnreadablePayload:
            logger.debug("Skipping unreadable %r", chunk)
    return messages
