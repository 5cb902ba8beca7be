import itertools
import struct
import zlib

import attr

from pngsm import exceptions as exc


PNG_CHUNK_TYPE_PROPERTY_BITMASK = 0b00100000
PNG_CHUNK_TYPE_CODE_ALLOWED_BYTES = frozenset(
    itertools.chain(range(65, 91), range(97, 123)))
PNG_CHUNK_TYPE_CODE_LENGTH = 4

# Length and type code before the data, CRC32 after it
CHUNK_METADATA_SIZE = 12
# The length field is an unsigned 32 bit integer
CHUNK_MAX_DATA_LENGTH = 2**32 - 1

# ASCII graphic characters plus space, TAB, LF, FF and CR
READABLE_DATA_BYTES = frozenset(
    itertools.chain(range(0x21, 0x7F), b' \t\n\x0c\r'))


_valid_bytes = attr.validators.instance_of(bytes)


def _valid_chunk_type_code(instance, attribute, value):
    _valid_bytes(instance, attribute, value)
    if len(value) != PNG_CHUNK_TYPE_CODE_LENGTH:
        raise exc.InvalidLength(len(value))
    for byte in value:
        if byte not in PNG_CHUNK_TYPE_CODE_ALLOWED_BYTES:
            raise exc.InvalidByteValue(byte)


def _valid_chunk_data(instance, attribute, value):
    _valid_bytes(instance, attribute, value)
    if len(value) > CHUNK_MAX_DATA_LENGTH:
        fmt = "Chunk data is {actual} bytes long, must be no longer than {max}"
        raise exc.PNGTooLarge(fmt.format(
            actual=len(value),
            max=CHUNK_MAX_DATA_LENGTH,
        ))


@attr.attributes(frozen=True)
class ChunkType:
    """
    A PNG chunk type code.

    The case of each of the four letters carries one property bit:
    critical, public, reserved and safe-to-copy, in that order.

    :ivar code: The 4 byte type code
    :type code: bytes
    """
    code = attr.attr(validator=_valid_chunk_type_code)  # type: bytes

    @classmethod
    def from_bytes(cls, value):
        """
        Build a chunk type from 4 raw bytes.

        :raises exceptions.InvalidByteValue:
            if a byte is not an ASCII letter
        """
        return cls(bytes(value))

    @classmethod
    def from_str(cls, value):
        """
        Build a chunk type from a 4 character string such as ``'tEXt'``.

        :raises exceptions.InvalidLength: if not exactly 4 characters
        :raises exceptions.InvalidChar:
            if a character is not an ASCII letter
        """
        if len(value) != PNG_CHUNK_TYPE_CODE_LENGTH:
            raise exc.InvalidLength(len(value))
        for char in value:
            if not (char.isascii() and char.isalpha()):
                raise exc.InvalidChar(char)
        return cls(value.encode('ascii'))

    @property
    def critical(self):
        # pylint: disable=unsubscriptable-object
        return not self.code[0] & PNG_CHUNK_TYPE_PROPERTY_BITMASK

    @property
    def public(self):
        # pylint: disable=unsubscriptable-object
        return not self.code[1] & PNG_CHUNK_TYPE_PROPERTY_BITMASK

    @property
    def reserved_bit_valid(self):
        # pylint: disable=unsubscriptable-object
        return not self.code[2] & PNG_CHUNK_TYPE_PROPERTY_BITMASK

    @property
    def valid(self):
        """
        Whether the chunk type may be written to a PNG stream.
        """
        return self.reserved_bit_valid

    @property
    def safe_to_copy(self):
        # pylint: disable=unsubscriptable-object
        return bool(self.code[3] & PNG_CHUNK_TYPE_PROPERTY_BITMASK)

    def __bytes__(self):
        return self.code

    def __str__(self):
        return self.code.decode('ascii')


@attr.attributes(frozen=True, repr=False)
class Chunk:
    """
    A single PNG chunk.

    Constructing one directly trusts the chunk type as given, even if
    it is not :attr:`ChunkType.valid`. Use :meth:`from_bytes` for
    untrusted input.

    :ivar chunk_type: The chunk's type code
    :type chunk_type: :class:`ChunkType`
    :ivar data: The chunk's data, of any length
    :type data: bytes
    """
    chunk_type = attr.attr(
        validator=attr.validators.instance_of(ChunkType))  # type: ChunkType
    data = attr.attr(validator=_valid_chunk_data)  # type: bytes

    @property
    def length(self):
        return len(self.data)

    @property
    def crc(self):
        crc = zlib.crc32(self.chunk_type.code)
        return zlib.crc32(self.data, crc)

    def data_as_string(self):
        """
        Return the data as text.

        :raises exceptions.UnreadablePayload:
            if a byte is neither printable ASCII nor ASCII whitespace
        """
        for position, byte in enumerate(self.data):
            if byte not in READABLE_DATA_BYTES:
                fmt = "Unreadable byte {byte:#04x} at offset {position}"
                raise exc.UnreadablePayload(fmt.format(
                    byte=byte,
                    position=position,
                ))
        return self.data.decode('ascii')

    def to_bytes(self):
        """
        Serialize the chunk: length, type code, data, then CRC32.
        """
        head = struct.pack('>I4s', self.length, self.chunk_type.code)
        return head + self.data + struct.pack('>I', self.crc)

    __bytes__ = to_bytes

    @classmethod
    def from_bytes(cls, buffer):
        """
        Parse and validate a chunk at the start of ``buffer``.

        Bytes after the end of the chunk are ignored; the chunk's size
        in the buffer is ``CHUNK_METADATA_SIZE + chunk.length``.

        :raises exceptions.ChunkTooShort:
            if there are fewer than 12 bytes
        :raises exceptions.ChunkTruncated:
            if the declared length runs past the end of the buffer
        :raises exceptions.InvalidChunkType:
            if the type code contains non-letters or its reserved bit
            is set
        :raises exceptions.BadCRC: if the checksum does not match
        """
        buffer = memoryview(buffer)
        if len(buffer) < CHUNK_METADATA_SIZE:
            fmt = "Chunk needs at least {min} bytes, got {actual}"
            raise exc.ChunkTooShort(fmt.format(
                min=CHUNK_METADATA_SIZE,
                actual=len(buffer),
            ))

        length, type_code = struct.unpack_from('>I4s', buffer)
        if CHUNK_METADATA_SIZE + length > len(buffer):
            fmt = (
                "Chunk claims {length} data bytes but only {available} "
                "are available"
            )
            raise exc.ChunkTruncated(fmt.format(
                length=length,
                available=len(buffer) - CHUNK_METADATA_SIZE,
            ))

        chunk_type = ChunkType.from_bytes(type_code)
        if not chunk_type.valid:
            fmt = (
                "Chunk type {code} is invalid, the third character must "
                "be uppercase"
            )
            raise exc.InvalidChunkType(fmt.format(code=chunk_type))

        data = bytes(buffer[8:8 + length])
        [declared_crc32] = struct.unpack_from('>I', buffer, 8 + length)
        chunk = cls(chunk_type, data)
        if chunk.crc != declared_crc32:
            raise exc.BadCRC(chunk.crc, declared_crc32)
        return chunk

    def __repr__(self):
        return '{name}(chunk_type={chunk_type!r}, length={length})'.format(
            name=self.__class__.__name__,
            chunk_type=self.chunk_type,
            length=self.length,
        )
