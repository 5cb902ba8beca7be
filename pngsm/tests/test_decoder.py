# pylint: disable=protected-access,no-self-use
import re
import struct
import zlib

import pytest


class RawChunkData:
    def __init__(self, type_, data):
        self.type = type_
        self.data = data

    @property
    def length(self):
        return len(self.data)

    @property
    def crc32_bytes(self):
        crc = zlib.crc32(self.type)
        crc = zlib.crc32(self.data, crc)
        return struct.pack('>I', crc)

    @property
    def bytes(self):
        length_type = struct.pack('>I4s', self.length, self.type)
        return length_type + self.data

    @property
    def bytes_with_crc32(self):
        return self.bytes + self.crc32_bytes


def test_rawchunkdata_crc32():
    expected = 0xcbf43926.to_bytes(4, "big")
    actual = RawChunkData(b'1234', b'56789').crc32_bytes
    assert actual == expected


ihdr_one_by_one_rgb24 = RawChunkData(
    b'IHDR',
    struct.pack(
        '>IIBBBBB',
        1,  # Image width
        1,  # Image height
        8,  # Bit depth
        2,  # Color type is RGB
        0,  # Compression method is DEFLATE with 32K sliding window
        0,  # Filter method is "adaptive filtering with five basic filter
            # types"
        0,  # Interlace method is no interlace
    )
)
# Single pixel example IDAT created with GIMP (hexdump with relevant data)
#                                            00 00  |              ..|
# 00 0c 49 44 41 54 08 d7  63 70 e9 38 03 00 02 ac  |..IDAT..cp.8....|
# 01 99 cb 83 c0 90                                 |......          |
#
# Chunk bytes:
# 00 00 00 0c 49 44 41 54 08 d7 63 70 e9 38 03 00 02 ac 01 99 cb 83 c0 90
# --len 12---| I  D  A  T|------------zlib-data--------------|---crc32---|
idat_onepix_4488cc = RawChunkData(
    b'IDAT',
    b'\x08\xd7\x63\x70\xe9\x38\x03\x00\x02\xac\x01\x99'
)

iend = RawChunkData(b'IEND', b'')

one_pixel_chunks = [ihdr_one_by_one_rgb24, idat_onepix_4488cc, iend]


def test_signature_correct():
    from pngsm.decoder import PNG_SIGNATURE

    assert PNG_SIGNATURE == b'\x89PNG\r\n\x1A\n'


def chunk_reader_with_bytes(stream_bytes):
    from pngsm.decoder import PNGChunkReader

    return PNGChunkReader(stream_bytes)


def png_bytes_from_fakes(chunk_fakes):
    from pngsm.decoder import PNG_SIGNATURE

    return PNG_SIGNATURE + b''.join(f.bytes_with_crc32 for f in chunk_fakes)


def chunks_from_fakes(chunk_fakes):
    from pngsm.models import Chunk, ChunkType

    return [Chunk(ChunkType(f.type), f.data) for f in chunk_fakes]


class TestPNGChunkReader:
    def test_iter(self):
        contents = png_bytes_from_fakes(one_pixel_chunks)
        chunk_reader = chunk_reader_with_bytes(contents)

        actual_chunks = list(chunk_reader)

        assert actual_chunks == chunks_from_fakes(one_pixel_chunks)
        assert chunk_reader.position == len(contents)

    def test_iter_signature_only(self):
        from pngsm.decoder import PNG_SIGNATURE

        chunk_reader = chunk_reader_with_bytes(PNG_SIGNATURE)
        assert list(chunk_reader) == []
        assert chunk_reader.position == len(PNG_SIGNATURE)

    def test_iter_accepts_bytearray(self):
        contents = bytearray(png_bytes_from_fakes(one_pixel_chunks))
        actual_chunks = list(chunk_reader_with_bytes(contents))
        assert actual_chunks == chunks_from_fakes(one_pixel_chunks)

    def test_iter_does_not_check_chunk_order(self):
        fakes = [iend, RawChunkData(b'ruSt', b'hidden'), ihdr_one_by_one_rgb24]
        contents = png_bytes_from_fakes(fakes)
        assert list(chunk_reader_with_bytes(contents)) == chunks_from_fakes(
            fakes)

    def test_iter_fails_on_bad_checksum(self):
        from pngsm.decoder import PNG_SIGNATURE
        from pngsm.exceptions import BadCRC

        ihdr_bytes = bytearray(ihdr_one_by_one_rgb24.bytes_with_crc32)
        # zero out the last byte to screw up the CRC
        ihdr_bytes[-1] = 0
        contents = b''.join([
            PNG_SIGNATURE,
            ihdr_bytes,
        ])
        chunk_reader = chunk_reader_with_bytes(contents)
        with pytest.raises(BadCRC):
            list(chunk_reader)

    def test_iter_fails_on_invalid_type_code(self):
        from pngsm.exceptions import InvalidChunkType

        contents = png_bytes_from_fakes([RawChunkData(b'I2DR', b'')])
        with pytest.raises(InvalidChunkType):
            list(chunk_reader_with_bytes(contents))

    def test_iter_fails_on_reserved_bit(self):
        from pngsm.exceptions import InvalidChunkType

        contents = png_bytes_from_fakes([RawChunkData(b'Rust', b'x')])
        with pytest.raises(InvalidChunkType):
            list(chunk_reader_with_bytes(contents))

    def test_iter_yields_chunks_before_error(self):
        from pngsm.exceptions import BadCRC

        contents = bytearray(png_bytes_from_fakes(one_pixel_chunks))
        contents[-1] ^= 0xff
        chunk_reader = iter(chunk_reader_with_bytes(contents))
        assert next(chunk_reader).chunk_type.code == b'IHDR'
        assert next(chunk_reader).chunk_type.code == b'IDAT'
        with pytest.raises(BadCRC):
            next(chunk_reader)

    def test_iter_fails_on_truncated_chunk(self):
        from pngsm.exceptions import ChunkTruncated

        contents = png_bytes_from_fakes(one_pixel_chunks)[:-13]
        with pytest.raises(ChunkTruncated):
            list(chunk_reader_with_bytes(contents))

    @pytest.mark.parametrize('extra', [b'\x00', b'extra', b'\x00' * 11])
    def test_iter_fails_on_trailing_bytes(self, extra):
        from pngsm.exceptions import ChunkTooShort

        contents = png_bytes_from_fakes(one_pixel_chunks) + extra
        chunk_reader = chunk_reader_with_bytes(contents)
        with pytest.raises(ChunkTooShort) as excinfo:
            list(chunk_reader)
        assert re.match(
            r"{} trailing bytes at byte \d+\b".format(len(extra)),
            str(excinfo.value)
        ) is not None

    def test__validate_signature(self):
        from pngsm.decoder import PNG_SIGNATURE

        chunk_reader = chunk_reader_with_bytes(PNG_SIGNATURE)
        chunk_reader._validate_signature()
        assert chunk_reader.position == len(PNG_SIGNATURE)

    @pytest.mark.parametrize('contents', [
        b'',
        b'\x89PNG',
        b'123456789',
    ])
    def test__validate_signature__errors_with_bad_signature(self, contents):
        from pngsm.exceptions import SignatureMismatch

        chunk_reader = chunk_reader_with_bytes(contents)
        with pytest.raises(SignatureMismatch):
            chunk_reader._validate_signature()

    def test__get_chunk(self):
        from pngsm.decoder import PNG_SIGNATURE

        contents = png_bytes_from_fakes(one_pixel_chunks)
        chunk_reader = chunk_reader_with_bytes(contents)
        chunk_reader._validate_signature()

        chunk = chunk_reader._get_chunk()

        assert chunk.chunk_type.code == b'IHDR'
        assert chunk.data == ihdr_one_by_one_rgb24.data
        assert chunk_reader.position == (
            len(PNG_SIGNATURE) + len(ihdr_one_by_one_rgb24.bytes_with_crc32))
