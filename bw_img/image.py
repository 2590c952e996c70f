"""
In-memory black and white bitmaps.

Packing convention: pixels are stored one bit per pixel, MSB first (bit 7 of
a byte is the leftmost pixel of its group of 8). Every row is packed on its
own and its last byte is padded with zero bits, so a row always occupies
``ceil(width / 8)`` bytes and an image occupies
``ceil(width / 8) * height`` bytes. :py:class:`PackedImage` refuses any
buffer of a different length.
"""
import logging
from dataclasses import dataclass
from typing import Optional, BinaryIO, TYPE_CHECKING

from bw_img.constants import HEADER_LEN, MAX_DIMENSION
from bw_img.exceptions import PixelDataLengthError
from bw_img.iteration import (
    BWByteIter, IterDirection, Horizontal, Chunk, bw_byte_iter
)

if TYPE_CHECKING:
    from bw_img.sources import PixelSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSize:

    width: int
    height: int

    def __post_init__(self):
        for name in ('width', 'height'):
            value: int = getattr(self, name)
            if not 0 <= value <= MAX_DIMENSION:
                raise ValueError(
                    f'{name} must be between 0 and {MAX_DIMENSION}, '
                    f'got {value}'
                )

    @property
    def row_bytes(self) -> int:
        """number of bytes one padded row occupies"""
        return (self.width + 7) // 8

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def padded_bytes_len(self) -> int:
        """length of the packed pixel buffer for an image of this size"""
        return self.row_bytes * self.height


@dataclass(frozen=True)
class PackedImage:
    """
    Black and white image stored as a 1-bit per pixel bitmap.

    Instances are immutable; ``pixels`` is always a :py:class:`bytes` of
    exactly ``size.padded_bytes_len()`` bytes.
    """

    size: ImageSize
    pixels: bytes

    def __post_init__(self):
        pixels: bytes = bytes(self.pixels)
        expected: int = self.size.padded_bytes_len()
        if len(pixels) != expected:
            raise PixelDataLengthError(self.size, expected, len(pixels))
        object.__setattr__(self, 'pixels', pixels)

    @classmethod
    def build(cls, source: 'PixelSource') -> 'PackedImage':
        """
        Build an image from a pixel source.

        :param source: anything implementing
          :py:class:`bw_img.sources.PixelSource`
        :raises bw_img.exceptions.ConversionError: if the source's pixel data
          does not match its geometry
        """
        size: ImageSize = source.image_geometry()
        pixels: bytes = source.to_packed_bits()
        logger.debug(
            'Packed %dx%d image from %s into %d bytes',
            size.width, size.height, type(source).__name__, len(pixels)
        )
        return cls(size, pixels)

    @classmethod
    def parse_file(cls, source: BinaryIO) -> Optional['PackedImage']:
        """Read one encoded image; return None at a clean end of input."""
        from bw_img.codec import decode
        return decode(source)

    def encode_as_file(self, sink: BinaryIO) -> int:
        """Write this image in the BWIM format; return the bytes written."""
        from bw_img.codec import encode
        return encode(sink, self)

    @property
    def encoded_len(self) -> int:
        """number of bytes this image takes up once encoded"""
        return HEADER_LEN + self.size.padded_bytes_len()

    def pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < self.size.width and 0 <= y < self.size.height):
            raise IndexError(
                f'pixel ({x}, {y}) is outside of a '
                f'{self.size.width}x{self.size.height} image'
            )
        byte: int = self.pixels[y * self.size.row_bytes + x // 8]
        return bool(byte & (1 << (7 - x % 8)))

    def iterator(
        self, direction: Optional[IterDirection] = None
    ) -> BWByteIter:
        if direction is None:
            direction = Horizontal()
        return BWByteIter(self.size, self.pixels, direction)

    def to_text(self, on: str = '██', off: str = '  ') -> str:
        """Render the image as text, one line per row."""
        out: str = ''
        for item in self.iterator(Horizontal()):
            if isinstance(item, Chunk):
                for bit in bw_byte_iter(item.byte, item.len):
                    out += on if bit else off
            else:
                out += '\n'
        return out
