import pytest

from bw_img.image import ImageSize, PackedImage
from bw_img.iteration import (
    BWByteIter, Chunk, Horizontal, IterDirection, ROW_END, RowEnd, Vertical,
    bw_byte_iter
)


def test_row_end_is_a_singleton():
    assert RowEnd() is ROW_END
    assert repr(ROW_END) == 'ROW_END'


def test_direction_is_abstract():
    with pytest.raises(TypeError):
        IterDirection()


class TestHorizontal:

    def test_all_on_8x2(self):
        img = PackedImage(ImageSize(8, 2), b'\xff\xff')
        assert list(img.iterator(Horizontal())) == [
            Chunk(0xFF, 8), ROW_END, Chunk(0xFF, 8), ROW_END
        ]

    def test_default_direction_is_horizontal(self):
        img = PackedImage(ImageSize(8, 1), b'\x0f')
        assert list(img.iterator()) == [Chunk(0x0F, 8), ROW_END]

    def test_partial_last_chunk(self):
        img = PackedImage(ImageSize(10, 2), b'\xff\xc0\x00\x40')
        assert list(img.iterator(Horizontal())) == [
            Chunk(0xFF, 8), Chunk(0xC0, 2), ROW_END,
            Chunk(0x00, 8), Chunk(0x40, 2), ROW_END,
        ]

    def test_empty_image(self):
        img = PackedImage(ImageSize(8, 0), b'')
        assert list(img.iterator(Horizontal())) == []


class TestVertical:

    def test_transposes_columns(self):
        # rows: "10", "01", "11"
        img = PackedImage(ImageSize(2, 3), b'\x80\x40\xc0')
        assert list(img.iterator(Vertical())) == [
            Chunk(0xA0, 3), ROW_END, Chunk(0x60, 3), ROW_END
        ]

    def test_diagonal(self):
        img = PackedImage(
            ImageSize(8, 8), bytes(0x80 >> y for y in range(8))
        )
        expected = []
        for x in range(8):
            expected += [Chunk(0x80 >> x, 8), ROW_END]
        assert list(img.iterator(Vertical())) == expected

    def test_tall_column_is_split(self):
        img = PackedImage(ImageSize(1, 10), b'\x80' * 10)
        assert list(img.iterator(Vertical())) == [
            Chunk(0xFF, 8), Chunk(0xC0, 2), ROW_END
        ]

    def test_padded_rows(self):
        # 10 wide: pixel x=9 lives in the second byte of each row
        img = PackedImage(ImageSize(10, 2), b'\x00\x40\x00\x00')
        out = list(img.iterator(Vertical()))
        assert len(out) == 20
        assert out[18] == Chunk(0x80, 2)
        assert out[:2] == [Chunk(0x00, 2), ROW_END]

    def test_matches_pixels(self):
        pixels = bytes([0b10110000, 0b01000000, 0b11100000])
        img = PackedImage(ImageSize(3, 3), pixels)
        columns = []
        column = []
        for item in img.iterator(Vertical()):
            if item is ROW_END:
                columns.append(column)
                column = []
            else:
                column += list(bw_byte_iter(item.byte, item.len))
        for x in range(3):
            assert columns[x] == [img.pixel(x, y) for y in range(3)]


class TestBWByteIter:

    def test_single_pass(self):
        img = PackedImage(ImageSize(8, 1), b'\xff')
        it = img.iterator(Horizontal())
        assert iter(it) is it
        assert list(it) == [Chunk(0xFF, 8), ROW_END]
        assert list(it) == []
        with pytest.raises(StopIteration):
            next(it)

    def test_independent_iterators(self):
        img = PackedImage(ImageSize(8, 2), b'\xaa\x55')
        first = img.iterator(Horizontal())
        second = img.iterator(Horizontal())
        assert next(first) == Chunk(0xAA, 8)
        assert next(first) is ROW_END
        assert next(second) == Chunk(0xAA, 8)
        assert next(first) == Chunk(0x55, 8)
        assert img.pixels == b'\xaa\x55'

    def test_custom_direction(self):
        class FirstByteOnly(IterDirection):

            def next(self, state):
                if state.current != (0, 0):
                    return None
                return (1, 0), Chunk(state.pixels[0], 8)

        it = BWByteIter(ImageSize(8, 2), b'\x12\x34', FirstByteOnly())
        assert list(it) == [Chunk(0x12, 8)]
        assert it.current == (1, 0)


def test_bw_byte_iter():
    assert list(bw_byte_iter(0b10100000, 3)) == [True, False, True]
    assert list(bw_byte_iter(0x01)) == [False] * 7 + [True]
