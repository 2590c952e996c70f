"""
Pixel sources: anything that can report its geometry and hand out its pixels
packed one bit per pixel.

All sources share one threshold rule. Luma is computed in single precision
as ``0.299 * R + 0.587 * G + 0.114 * B`` and truncated to an integer; a pixel
is "on" when that luma is strictly greater than the threshold. Rows are
packed MSB first and padded to a whole byte (see :py:mod:`bw_img.image`).
"""
import logging
from abc import ABC, abstractmethod
from io import BytesIO
from typing import Union, BinaryIO

import numpy as np
import png
from PIL import Image

from bw_img.constants import DEFAULT_THRESHOLD, LUMA_WEIGHTS
from bw_img.exceptions import WrongSizeError
from bw_img.image import ImageSize, PackedImage

logger = logging.getLogger(__name__)

_WEIGHTS = tuple(np.float32(w) for w in LUMA_WEIGHTS)


def luma(r: int, g: int, b: int) -> int:
    """Integer luma of a single pixel, computed the same way as for images."""
    wr, wg, wb = _WEIGHTS
    return int(wr * np.float32(r) + wg * np.float32(g) + wb * np.float32(b))


def threshold_rows(rgb: np.ndarray, threshold: int) -> np.ndarray:
    """
    Apply the luma threshold to a ``(height, width, 3)`` array of 8-bit RGB
    values and return a ``(height, width)`` boolean array of "on" pixels.
    """
    wr, wg, wb = _WEIGHTS
    channels: np.ndarray = rgb.astype(np.float32)
    gray: np.ndarray = (
        wr * channels[..., 0] + wg * channels[..., 1] + wb * channels[..., 2]
    )
    return gray.astype(np.uint8) > threshold


def pack_rows(bits: np.ndarray) -> bytes:
    """Pack a ``(height, width)`` boolean array, each row padded to a byte."""
    return np.packbits(bits, axis=1, bitorder='big').tobytes()


class PixelSource(ABC):

    def __init__(self, threshold: int = DEFAULT_THRESHOLD):
        self.threshold: int = DEFAULT_THRESHOLD
        self.set_bw_threshold(threshold)

    def set_bw_threshold(self, threshold: int):
        if not 0 <= threshold <= 255:
            raise ValueError(
                f'threshold must be between 0 and 255, got {threshold}'
            )
        self.threshold = threshold

    @abstractmethod
    def image_geometry(self) -> ImageSize:
        raise NotImplementedError()

    @abstractmethod
    def to_packed_bits(self) -> bytes:
        """
        Return the packed bitmap for this source.

        :raises bw_img.exceptions.WrongSizeError: if the pixel data does not
          match the reported geometry
        """
        raise NotImplementedError()

    def to_packed_image(self) -> PackedImage:
        return PackedImage.build(self)

    def _pack_rgb(self, rgb: np.ndarray) -> bytes:
        return pack_rows(threshold_rows(rgb, self.threshold))


class RgbData(PixelSource):
    """Interleaved 8-bit RGB pixels, row-major, with caller-supplied size."""

    def __init__(
        self, data: Union[bytes, bytearray, memoryview], width: int,
        height: int, threshold: int = DEFAULT_THRESHOLD
    ):
        super().__init__(threshold)
        self.data: Union[bytes, bytearray, memoryview] = data
        self.width: int = width
        self.height: int = height

    def image_geometry(self) -> ImageSize:
        return ImageSize(self.width, self.height)

    def to_packed_bits(self) -> bytes:
        data_len: int = len(self.data)
        pixel_count: int = self.image_geometry().pixel_count
        if data_len % 3 or data_len // 3 != pixel_count:
            raise WrongSizeError(self.width, self.height, data_len // 3)
        rgb: np.ndarray = np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, 3
        )
        return self._pack_rgb(rgb)


class PilImage(PixelSource):
    """An image already decoded by Pillow, in any mode."""

    def __init__(self, img: Image.Image, threshold: int = DEFAULT_THRESHOLD):
        super().__init__(threshold)
        self.img: Image.Image = img

    def image_geometry(self) -> ImageSize:
        return ImageSize(self.img.width, self.img.height)

    def to_packed_bits(self) -> bytes:
        img: Image.Image = self.img
        if img.mode != 'RGB':
            logger.debug('Converting %s image to RGB', img.mode)
            img = img.convert('RGB')
        rgb: np.ndarray = np.asarray(img, dtype=np.uint8)
        if rgb.shape != (self.img.height, self.img.width, 3):
            raise WrongSizeError(
                self.img.width, self.img.height, rgb.size // 3
            )
        return self._pack_rgb(rgb)


class PngImage(PixelSource):
    """
    A PNG file decoded with pypng. ``data`` is either a filename or a binary
    file-like object positioned at the start of the PNG.
    """

    def __init__(
        self, data: Union[str, BinaryIO], threshold: int = DEFAULT_THRESHOLD
    ):
        super().__init__(threshold)
        reader: png.Reader
        if isinstance(data, str):
            logger.debug('Using PNG from file at: %s', data)
            reader = png.Reader(filename=data)
        else:
            logger.debug('Using PNG from file-like object')
            reader = png.Reader(file=data)
        self.width: int
        self.height: int
        self.width, self.height, rows, _ = reader.asRGBA8()
        self._rgba: np.ndarray = np.array(
            [np.frombuffer(bytes(row), dtype=np.uint8) for row in rows],
            dtype=np.uint8
        )

    @classmethod
    def from_bytes(
        cls, data: bytes, threshold: int = DEFAULT_THRESHOLD
    ) -> 'PngImage':
        return cls(BytesIO(data), threshold=threshold)

    def image_geometry(self) -> ImageSize:
        return ImageSize(self.width, self.height)

    def to_packed_bits(self) -> bytes:
        if self._rgba.size != self.image_geometry().pixel_count * 4:
            raise WrongSizeError(self.width, self.height, self._rgba.size // 4)
        rgba: np.ndarray = self._rgba.reshape(self.height, self.width, 4)
        # alpha is ignored, as for Pillow's RGB conversion
        return self._pack_rgb(rgba[..., :3])
