class PNGError(Exception):
    pass


class DecodeError(PNGError):
    pass


class UnexpectedEOF(DecodeError):
    pass


class ChunkTooShort(UnexpectedEOF):
    pass


class ChunkTruncated(UnexpectedEOF):
    pass


class SignatureMismatch(DecodeError):
    pass


class BadCRC(DecodeError):
    """
    The CRC32 stored with a chunk does not match its type and data.

    :ivar expected: The checksum computed from the chunk type and data
    :ivar actual: The checksum read from the stream
    """
    def __init__(self, expected, actual):
        super().__init__(
            "CRC32 mismatch: expected {expected:#010x}, got {actual:#010x}"
            .format(expected=expected, actual=actual)
        )
        self.expected = expected
        self.actual = actual


class InvalidChunkType(DecodeError, ValueError):
    pass


class InvalidByteValue(InvalidChunkType):
    def __init__(self, value):
        super().__init__(
            "Invalid chunk type byte {value:#04x}, must be A-Z or a-z".format(
                value=value)
        )
        self.value = value


class InvalidChar(InvalidChunkType):
    def __init__(self, char):
        super().__init__(
            "Invalid chunk type character {char!r}, must be A-Z or a-z".format(
                char=char)
        )
        self.char = char


class InvalidLength(InvalidChunkType):
    def __init__(self, length):
        super().__init__(
            "Chunk type must be exactly 4 long, got {length}".format(
                length=length)
        )
        self.length = length


class ChunkNotFound(PNGError):
    def __init__(self, chunk_type):
        super().__init__(
            "No chunk with chunk type {chunk_type}".format(
                chunk_type=chunk_type)
        )
        self.chunk_type = chunk_type


class UnreadablePayload(PNGError):
    pass


class PNGTooLarge(PNGError):
    pass
