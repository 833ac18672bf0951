"""Tests for raw RGB buffers and decoding."""

import pytest
from PIL import Image

from pixmatch.imaging.raw import RawImage, InvalidImageError, DecodeError, decode_image, load_image
from helpers.image_factory import encode, solid_image, solid_png_bytes


class TestRawImage:
    def test_packed_stride_by_default(self):
        image = RawImage(width=4, height=2, buffer=bytes(24))

        assert image.stride == 12

    def test_buffer_too_short(self):
        with pytest.raises(InvalidImageError):
            RawImage(width=2, height=2, buffer=bytes(11))

    def test_stride_shorter_than_row(self):
        with pytest.raises(InvalidImageError):
            RawImage(width=4, height=1, stride=10, buffer=bytes(12))

    def test_negative_dimensions(self):
        with pytest.raises(InvalidImageError):
            RawImage(width=-1, height=1, buffer=b"")

    def test_zero_area_is_constructible_but_empty(self):
        image = RawImage(width=0, height=3, buffer=b"")

        assert image.is_empty
        with pytest.raises(InvalidImageError):
            image.require_area()

    def test_pixels_drop_padding(self):
        buffer = bytes([1, 2, 3, 4, 5, 6, 99, 99, 7, 8, 9, 10, 11, 12, 99, 99])
        image = RawImage(width=2, height=2, stride=8, buffer=buffer)

        pixels = image.pixels()

        assert pixels.shape == (2, 2, 3)
        assert pixels[1, 0].tolist() == [7, 8, 9]
        assert 99 not in pixels

    def test_pixels_are_read_only_for_mutable_buffers(self):
        image = RawImage(width=2, height=1, buffer=bytearray([1, 2, 3, 4, 5, 6]))

        pixels = image.pixels()

        assert not pixels.flags.writeable
        with pytest.raises(ValueError):
            pixels[0, 0, 0] = 9
        assert image.buffer[0] == 1

    def test_to_pil_honours_stride(self):
        buffer = bytes([1, 2, 3, 0, 4, 5, 6, 0])
        image = RawImage(width=1, height=2, stride=4, buffer=buffer)

        pil_image = image.to_pil()

        assert pil_image.mode == "RGB"
        assert pil_image.size == (1, 2)
        assert pil_image.getpixel((0, 1)) == (4, 5, 6)

    def test_to_pil_rejects_zero_area(self):
        with pytest.raises(InvalidImageError):
            RawImage(width=0, height=0, buffer=b"").to_pil()

    @pytest.mark.parametrize("mode, color", [
        ("RGBA", (255, 0, 0, 128)),
        ("L", 128),
        ("P", 3),
    ])
    def test_from_pil_converts_to_rgb(self, mode, color):
        image = RawImage.from_pil(Image.new(mode, (3, 2), color=color))

        assert (image.width, image.height) == (3, 2)
        assert len(image.buffer) == 18


class TestDecoding:
    def test_decode_png(self):
        image = decode_image(solid_png_bytes((5, 4), (10, 20, 30)))

        assert (image.width, image.height) == (5, 4)
        assert image.pixels()[0, 0].tolist() == [10, 20, 30]

    def test_decode_jpeg(self):
        image = decode_image(encode(solid_image((8, 8), (200, 200, 200)), format="JPEG"))

        assert (image.width, image.height) == (8, 8)

    def test_decode_garbage(self):
        with pytest.raises(DecodeError):
            decode_image(b"not an image")

    def test_decode_truncated(self):
        data = solid_png_bytes((32, 32), (1, 2, 3))

        with pytest.raises(DecodeError):
            decode_image(data[: len(data) // 2])

    def test_load_image(self, tmp_path):
        path = tmp_path / "pic.png"
        path.write_bytes(solid_png_bytes((3, 3), (9, 9, 9)))

        assert load_image(path).width == 3

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "missing.png")
