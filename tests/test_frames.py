import logging
from io import BytesIO

import pytest

from bw_img.frames import FrameConverter, RawFrame
from bw_img.image import ImageSize, PackedImage
from bw_img.stream import decompress_images

WHITE = bytes([255, 255, 255])
BLACK = bytes([0, 0, 0])


def test_converts_frames():
    converter = FrameConverter()
    images = list(converter.convert([
        RawFrame(WHITE * 8, 8, 1),
        RawFrame(BLACK * 2 + WHITE * 2, 2, 2),
    ]))
    assert images == [
        PackedImage(ImageSize(8, 1), b'\xff'),
        PackedImage(ImageSize(2, 2), b'\x00\xc0'),
    ]
    assert (converter.converted, converter.skipped) == (2, 0)


def test_wrong_size_frames_are_skipped(caplog):
    converter = FrameConverter()
    with caplog.at_level(logging.WARNING, logger='bw_img.frames'):
        images = list(converter.convert([
            RawFrame(WHITE, 1, 1),
            RawFrame(WHITE * 3, 2, 2),
            RawFrame(BLACK, 1, 1),
        ]))
    assert images == [
        PackedImage(ImageSize(1, 1), b'\x80'),
        PackedImage(ImageSize(1, 1), b'\x00'),
    ]
    assert (converter.converted, converter.skipped) == (2, 1)
    assert 'Skipping frame 1' in caplog.text


def test_other_errors_propagate():
    converter = FrameConverter()
    with pytest.raises(TypeError):
        list(converter.convert([RawFrame(None, 1, 1)]))
    assert converter.skipped == 0


def test_threshold():
    red = RawFrame(bytes([255, 0, 0]), 1, 1)
    assert FrameConverter(threshold=75).convert_frame(red).pixels == b'\x80'
    assert FrameConverter(threshold=76).convert_frame(red).pixels == b'\x00'


def test_video_to_stream(monkeypatch):
    pytest.importorskip('av')
    from bw_img import video

    frames = [RawFrame(WHITE * 4, 2, 2), RawFrame(WHITE, 2, 2)]
    monkeypatch.setattr(
        video, 'decode_video', lambda path, width, height: iter(frames)
    )
    sink = BytesIO()
    converter = video.video_to_stream('clip.mp4', sink, 2, 2)
    assert (converter.converted, converter.skipped) == (1, 1)
    sink.seek(0)
    assert list(decompress_images(sink)) == [
        PackedImage(ImageSize(2, 2), b'\xc0\xc0')
    ]
