"""
Video decoding with PyAV (install the ``video`` extra).

Frames are decoded, rescaled and converted to RGB24 by FFmpeg, then handed to
:py:class:`bw_img.frames.FrameConverter`.
"""
import logging
from typing import Iterator, Optional, BinaryIO

import av
from av.error import FFmpegError

from bw_img.constants import DEFAULT_COMPRESSLEVEL, DEFAULT_THRESHOLD
from bw_img.exceptions import VideoError
from bw_img.frames import FrameConverter, RawFrame
from bw_img.stream import compress_images

logger = logging.getLogger(__name__)


def decode_video(
    path: str, width: Optional[int] = None, height: Optional[int] = None
) -> Iterator[RawFrame]:
    """
    Decode every frame of the first video stream in ``path``.

    :param width: output width in pixels; source width if None
    :param height: output height in pixels; source height if None
    :raises bw_img.exceptions.VideoError: if FFmpeg cannot open or decode
      the file
    """
    try:
        container = av.open(path, mode='r')
    except FFmpegError as ex:
        raise VideoError(f'FFmpeg error opening {path}: {ex}') from ex
    try:
        vstream = next(
            (s for s in container.streams if s.type == 'video'), None
        )
        if vstream is None:
            raise VideoError(f'no video stream in {path}')
        logger.debug(
            'Decoding video stream of %s (%sx%s) to %sx%s',
            path, vstream.codec_context.width, vstream.codec_context.height,
            width, height
        )
        for frame in container.decode(vstream):
            out = frame.reformat(width=width, height=height, format='rgb24')
            rgb = out.to_ndarray()
            yield RawFrame(rgb.tobytes(), out.width, out.height)
    except FFmpegError as ex:
        raise VideoError(f'FFmpeg error decoding {path}: {ex}') from ex
    finally:
        container.close()


def video_to_stream(
    path: str, sink: BinaryIO, width: Optional[int] = None,
    height: Optional[int] = None, threshold: int = DEFAULT_THRESHOLD,
    compressed: bool = True, compresslevel: int = DEFAULT_COMPRESSLEVEL
) -> FrameConverter:
    """
    Convert every frame of a video and write them to ``sink`` as one image
    stream. Returns the converter so callers can inspect how many frames
    were converted or skipped.
    """
    converter: FrameConverter = FrameConverter(threshold=threshold)
    compress_images(
        converter.convert(decode_video(path, width, height)), sink,
        compressed=compressed, compresslevel=compresslevel
    )
    logger.info(
        'Wrote %d frames of %s (%d skipped)',
        converter.converted, path, converter.skipped
    )
    return converter
