"""
Single image framing for the BWIM file format.

Layout, all integers little endian::

    0-3   magic number, "BWIM"
    4-7   version number, u32, always 1
    8-11  width, u32
    12-15 height, u32
    16-   packed pixels, ceil(width / 8) * height bytes
"""
import logging
import struct
from typing import Optional, BinaryIO

from bw_img.constants import (
    HEADER_FORMAT, HEADER_LEN, MAGIC, READ_CHUNK_SIZE, VERSION
)
from bw_img.exceptions import (
    BadMagicError, BadVersionError, HeaderReadError, TruncatedHeaderError,
    TruncatedBodyError
)
from bw_img.image import ImageSize, PackedImage

logger = logging.getLogger(__name__)


def read_up_to(source: BinaryIO, length: int) -> bytes:
    """
    Read ``length`` bytes from ``source``, looping over short reads. Fewer
    bytes are returned only if the source reaches end of input. Reads are
    issued in chunks of at most ``READ_CHUNK_SIZE`` bytes, so a corrupt
    length never makes the source allocate it up front.
    """
    buffer: bytearray = bytearray()
    while len(buffer) < length:
        chunk: bytes = source.read(
            min(length - len(buffer), READ_CHUNK_SIZE)
        )
        if not chunk:
            break
        buffer += chunk
    return bytes(buffer)


def parse_header(source: BinaryIO) -> Optional[ImageSize]:
    """
    Parse the 16-byte header of one encoded image.

    :return: the image size, or None if ``source`` was already at the end of
      input
    :raises bw_img.exceptions.HeaderError: on a truncated header, a bad magic
      number, an unsupported version or a failed read
    """
    try:
        header: bytes = read_up_to(source, HEADER_LEN)
    except OSError as ex:
        raise HeaderReadError(ex) from ex
    if not header:
        return None
    if len(header) != HEADER_LEN:
        raise TruncatedHeaderError(len(header))
    magic: bytes
    version: int
    width: int
    height: int
    magic, version, width, height = struct.unpack(HEADER_FORMAT, header)
    if magic != MAGIC:
        raise BadMagicError(magic)
    if version != VERSION:
        raise BadVersionError(version)
    logger.debug('Parsed header: %dx%d image', width, height)
    return ImageSize(width, height)


def write_header(sink: BinaryIO, size: ImageSize):
    sink.write(
        struct.pack(HEADER_FORMAT, MAGIC, VERSION, size.width, size.height)
    )


def parse_body(source: BinaryIO, size: ImageSize) -> PackedImage:
    expected: int = size.padded_bytes_len()
    data: bytes = read_up_to(source, expected)
    if len(data) != expected:
        raise TruncatedBodyError(expected, len(data))
    return PackedImage(size, data)


def encode(sink: BinaryIO, image: PackedImage) -> int:
    """
    Write ``image`` (header and body) to ``sink`` and flush it.

    :return: number of bytes written
    """
    write_header(sink, image.size)
    sink.write(image.pixels)
    sink.flush()
    return image.encoded_len


def decode(source: BinaryIO) -> Optional[PackedImage]:
    """Read one image; return None if ``source`` is at the end of input."""
    size: Optional[ImageSize] = parse_header(source)
    if size is None:
        return None
    return parse_body(source, size)
