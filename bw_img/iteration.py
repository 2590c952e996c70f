"""
Directional iteration over packed bitmaps.

A :py:class:`BWByteIter` walks an image's packed bytes and yields
:py:class:`Chunk` items (up to 8 pixels packed MSB first) and
:py:data:`ROW_END` markers. The traversal order is delegated to a stateless
:py:class:`IterDirection`; the iterator itself only owns the cursor.
"""
from abc import ABC, abstractmethod
from typing import (
    Iterator, NamedTuple, Optional, Tuple, Union, TYPE_CHECKING
)

if TYPE_CHECKING:
    from bw_img.image import ImageSize

Position = Tuple[int, int]


class Chunk(NamedTuple):
    #: pixels packed MSB first; only the top ``len`` bits are meaningful
    byte: int
    #: number of pixels in ``byte``, 1 to 8
    len: int


class RowEnd:
    """Marks the end of a row (horizontal) or column (vertical)."""

    _instance: Optional['RowEnd'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'ROW_END'


ROW_END: RowEnd = RowEnd()

IterOutput = Union[Chunk, RowEnd]


class IterState(NamedTuple):
    size: 'ImageSize'
    current: Position
    pixels: bytes


class IterDirection(ABC):

    @abstractmethod
    def next(self, state: IterState) -> Optional[Tuple[Position, IterOutput]]:
        """
        Return the cursor position after this step and the step's output, or
        None once the traversal is finished.
        """
        raise NotImplementedError()


class Horizontal(IterDirection):
    """Left to right within a row, rows top to bottom."""

    def next(self, state: IterState) -> Optional[Tuple[Position, IterOutput]]:
        x, y = state.current
        width: int = state.size.width
        if y >= state.size.height:
            return None
        if x >= width:
            return (0, y + 1), ROW_END
        byte: int = state.pixels[y * state.size.row_bytes + x // 8]
        return (x + 8, y), Chunk(byte, min(8, width - x))


class Vertical(IterDirection):
    """
    Top to bottom within a column, columns left to right. Each chunk is a
    transposed byte: bit 7 holds the topmost of up to 8 stacked pixels.
    """

    def next(self, state: IterState) -> Optional[Tuple[Position, IterOutput]]:
        x, y = state.current
        height: int = state.size.height
        if x >= state.size.width:
            return None
        if y >= height:
            return (x + 1, 0), ROW_END
        stride: int = state.size.row_bytes
        shift: int = 7 - x % 8
        from_byte: int = y * stride + x // 8
        byte: int = 0
        length: int = 0
        for i in range(min(8, height - y)):
            pos: int = from_byte + i * stride
            if pos >= len(state.pixels):
                break
            byte |= ((state.pixels[pos] >> shift) & 0b1) << (7 - i)
            length += 1
        if length == 0:
            # buffer ends before the image does; nothing left to read
            return None
        return (x, y + length), Chunk(byte, length)


class BWByteIter:
    """
    Single-pass iterator over an image in the given direction.

    The pixel buffer is only ever read, so any number of iterators may share
    one image.
    """

    def __init__(
        self, size: 'ImageSize', pixels: bytes, direction: IterDirection
    ):
        self.size: 'ImageSize' = size
        self.current: Position = (0, 0)
        self.pixels: bytes = pixels
        self.direction: IterDirection = direction
        self._done: bool = False

    def __iter__(self) -> 'BWByteIter':
        return self

    def __next__(self) -> IterOutput:
        if self._done:
            raise StopIteration
        step = self.direction.next(
            IterState(self.size, self.current, self.pixels)
        )
        if step is None:
            self._done = True
            raise StopIteration
        self.current, out = step
        return out


def bw_byte_iter(byte: int, length: int = 8) -> Iterator[bool]:
    """Yield the first ``length`` pixels of a packed byte, MSB first."""
    for i in range(length):
        yield bool(byte & (1 << (7 - i)))
