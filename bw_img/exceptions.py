import typing

if typing.TYPE_CHECKING:
    from bw_img.image import ImageSize


class BWImageError(Exception):
    """Base class for every error raised by bw_img."""


class HeaderError(BWImageError):
    """The 16-byte header of an encoded image could not be parsed."""


class BadMagicError(HeaderError):

    def __init__(self, magic: bytes):
        self.magic: bytes = magic
        super().__init__(
            f'Invalid magic number: expected b"BWIM" but got {magic!r}'
        )


class BadVersionError(HeaderError):

    def __init__(self, version: int):
        self.version: int = version
        super().__init__(
            f'Invalid version number: expected 1 but got {version}'
        )


class TruncatedHeaderError(HeaderError):

    def __init__(self, received: int):
        self.received: int = received
        super().__init__(
            f'Truncated header: expected 16 bytes but only received '
            f'{received} before end of input.'
        )


class HeaderReadError(HeaderError):

    def __init__(self, cause: OSError):
        self.cause: OSError = cause
        super().__init__(f'Error reading header: {cause}')


class TruncatedBodyError(BWImageError):

    def __init__(self, expected: int, received: int):
        self.expected: int = expected
        self.received: int = received
        super().__init__(
            f'Truncated image data: expected {expected} bytes but only '
            f'received {received} before end of input.'
        )


class ConversionError(BWImageError):
    """Pixel data could not be converted to a packed bitmap."""


class WrongSizeError(ConversionError):

    def __init__(self, width: int, height: int, pixel_count: int):
        self.width: int = width
        self.height: int = height
        self.pixel_count: int = pixel_count
        super().__init__(
            f'{width}x{height} does not match the pixel data, '
            f'got {pixel_count} pixels'
        )


class PixelDataLengthError(BWImageError):

    def __init__(self, size: 'ImageSize', expected: int, actual: int):
        self.size: 'ImageSize' = size
        self.expected: int = expected
        self.actual: int = actual
        super().__init__(
            f'Packed pixel data for a {size.width}x{size.height} image must '
            f'be {expected} bytes long, got {actual}'
        )


class StreamError(BWImageError):

    def __init__(self, index: int, cause: Exception, position: int):
        self.index: int = index
        self.cause: Exception = cause
        self.position: int = position
        super().__init__(
            f'error parsing bw image {index}: {cause}, position: {position}'
        )


class VideoError(BWImageError):
    """Decoding a video into frames failed."""
