"""
Multi-image streams: encoded images concatenated with no separator,
optionally gzip compressed as a whole.
"""
import gzip
import logging
from typing import Iterable, Optional, BinaryIO

from bw_img.codec import encode, decode
from bw_img.constants import DEFAULT_COMPRESSLEVEL
from bw_img.exceptions import StreamError
from bw_img.image import PackedImage

logger = logging.getLogger(__name__)


def compress_images(
    images: Iterable[PackedImage], sink: BinaryIO, compressed: bool = True,
    compresslevel: int = DEFAULT_COMPRESSLEVEL
) -> int:
    """
    Encode ``images`` one after another into ``sink``.

    When ``compressed`` is set, one gzip member wraps the whole batch and is
    finished after the last image. ``sink`` itself is never closed.

    :return: total number of uncompressed bytes written
    """
    out: BinaryIO = sink
    if compressed:
        out = gzip.GzipFile(
            fileobj=sink, mode='wb', compresslevel=compresslevel
        )
    total: int = 0
    count: int = 0
    try:
        for image in images:
            logger.debug(
                'Encoding image %d (%dx%d) at position %d',
                count, image.size.width, image.size.height, total
            )
            total += encode(out, image)
            count += 1
    finally:
        if compressed:
            out.close()
    sink.flush()
    logger.info(
        'Wrote %d images (%d bytes uncompressed, compressed=%s)',
        count, total, compressed
    )
    return total


class ImageStream:
    """
    Lazily decodes images from a stream, one per iteration step.

    ``index`` is the number of images decoded so far and ``position`` the
    uncompressed offset of the next header. The stream can only be consumed
    once and must not be shared between threads.
    """

    def __init__(self, source: BinaryIO, compressed: bool = True):
        self._source: BinaryIO = source
        self._owns_source: bool = compressed
        if compressed:
            self._source = gzip.GzipFile(fileobj=source, mode='rb')
        self.index: int = 0
        self.position: int = 0
        self._done: bool = False

    def close(self):
        """
        Finish the stream. Closes the gzip wrapper this stream created, never
        the caller's source.
        """
        self._done = True
        if self._owns_source:
            self._source.close()

    def __iter__(self) -> 'ImageStream':
        return self

    def __next__(self) -> PackedImage:
        if self._done:
            raise StopIteration
        try:
            image: Optional[PackedImage] = decode(self._source)
        except Exception as ex:
            self.close()
            logger.debug(
                'Failed decoding image %d at position %d: %s',
                self.index, self.position, ex
            )
            raise StreamError(self.index, ex, self.position) from ex
        if image is None:
            self.close()
            logger.debug(
                'End of stream after %d images (%d bytes)',
                self.index, self.position
            )
            raise StopIteration
        self.index += 1
        self.position += image.encoded_len
        return image


def decompress_images(source: BinaryIO, compressed: bool = True) -> ImageStream:
    return ImageStream(source, compressed=compressed)
