from typing import Tuple

#: First four bytes of every encoded image
MAGIC: bytes = b"BWIM"

#: Only known file format version
VERSION: int = 1

#: struct format of the header; magic, version, width, height (little endian)
HEADER_FORMAT: str = "<4sIII"

#: Size of the header in bytes
HEADER_LEN: int = 16

#: Largest width or height the header can carry
MAX_DIMENSION: int = 0xFFFFFFFF

#: Luma cutoff; a pixel is "on" when its luma is strictly greater
DEFAULT_THRESHOLD: int = 128

#: Weights applied to R, G and B (ITU-R BT.601)
LUMA_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

#: Largest single read() issued while reading an image body
READ_CHUNK_SIZE: int = 64 * 1024

#: gzip level used for compressed image streams
DEFAULT_COMPRESSLEVEL: int = 9
