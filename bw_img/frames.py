import logging
from typing import Iterable, Iterator, NamedTuple

from bw_img.constants import DEFAULT_THRESHOLD
from bw_img.exceptions import WrongSizeError
from bw_img.image import PackedImage
from bw_img.sources import RgbData

logger = logging.getLogger(__name__)


class RawFrame(NamedTuple):
    """One decoded video frame as interleaved 8-bit RGB."""
    data: bytes
    width: int
    height: int


class FrameConverter:
    """
    Turns decoded RGB frames into packed images.

    Frames whose data does not match their declared geometry are skipped and
    tallied in :py:attr:`skipped`; every other error propagates.
    """

    def __init__(self, threshold: int = DEFAULT_THRESHOLD):
        self.threshold: int = threshold
        self.converted: int = 0
        self.skipped: int = 0

    def convert_frame(self, frame: RawFrame) -> PackedImage:
        return PackedImage.build(
            RgbData(frame.data, frame.width, frame.height, self.threshold)
        )

    def convert(self, frames: Iterable[RawFrame]) -> Iterator[PackedImage]:
        frame: RawFrame
        for i, frame in enumerate(frames):
            try:
                image: PackedImage = self.convert_frame(frame)
            except WrongSizeError as ex:
                self.skipped += 1
                logger.warning('Skipping frame %d: %s', i, ex)
                continue
            self.converted += 1
            yield image
        logger.info(
            'Converted %d frames, skipped %d', self.converted, self.skipped
        )
