"""Tests for zpl2dpl.raster.

Covers:
    - thresholding on the plain RGB average, alpha ignored
    - MSB-first packing with row-aligned padding
    - image loading from files and data URLs, failures as ImageLoadError
    - images over the Pillow pixel limit fail to load

Run:
    pytest tests/test_raster.py -v
"""

import base64
import io

import pytest
from PIL import Image

from zpl2dpl.raster import (ImageLoadError, bitmap_to_dpl_hex, encode_image,
                            image_to_bitmap, load_image)


@pytest.mark.parametrize('width, height', [(1, 1), (8, 2), (10, 3), (17, 5)])
def test_blank_image_is_all_zero(width, height):
    image = Image.new('RGB', (width, height), 'white')
    data = encode_image(image)
    assert len(data) == 2 * height * ((width + 7) // 8)
    assert set(data) == {'0'}


def test_black_row_fills_byte():
    assert encode_image(Image.new('RGB', (8, 1), 'black')) == 'FF'


def test_partial_byte_is_left_aligned():
    assert encode_image(Image.new('RGB', (10, 1), 'black')) == 'FFC0'


def test_rows_start_on_byte_boundary():
    image = Image.new('RGB', (3, 2), 'white')
    image.putpixel((0, 0), (0, 0, 0))
    image.putpixel((2, 1), (0, 0, 0))
    assert encode_image(image) == '8020'


def test_threshold_uses_channel_average():
    image = Image.new('RGB', (3, 1))
    image.putpixel((0, 0), (127, 127, 127))
    image.putpixel((1, 0), (128, 128, 128))
    image.putpixel((2, 0), (100, 200, 90))  # average 130
    bits, width, height = image_to_bitmap(image)
    assert (width, height) == (3, 1)
    assert list(bits) == [1, 0, 0]

    bits, _, _ = image_to_bitmap(image, threshold=131)
    assert list(bits) == [1, 1, 1]


def test_alpha_is_ignored():
    image = Image.new('RGBA', (2, 1), (0, 0, 0, 0))
    image.putpixel((1, 0), (255, 255, 255, 255))
    assert encode_image(image) == '80'


def test_grayscale_image():
    image = Image.new('L', (8, 1), 255)
    image.putpixel((7, 0), 0)
    assert encode_image(image) == '01'


def test_bitmap_to_dpl_hex():
    assert bitmap_to_dpl_hex([1, 0, 1, 0, 1, 0, 1, 0, 1], 9, 1) == 'AA80'
    assert bitmap_to_dpl_hex([], 0, 0) == ''


def test_load_image_from_file(tmp_path):
    path = tmp_path / 'logo.png'
    Image.new('RGB', (4, 2), 'black').save(path)
    image = load_image(str(path))
    assert image.size == (4, 2)
    assert encode_image(image) == 'F0F0'


def test_load_image_from_data_url():
    buf = io.BytesIO()
    Image.new('RGB', (8, 1), 'black').save(buf, format='PNG')
    uri = 'data:image/png;base64,' + base64.b64encode(buf.getvalue()).decode('ascii')
    assert encode_image(load_image(uri)) == 'FF'


def test_load_missing_image(tmp_path):
    with pytest.raises(ImageLoadError):
        load_image(str(tmp_path / 'missing.png'))


def test_load_corrupt_image(tmp_path):
    path = tmp_path / 'broken.png'
    path.write_bytes(b'not an image')
    with pytest.raises(ImageLoadError):
        load_image(str(path))


def test_load_oversized_image(tmp_path, monkeypatch):
    path = tmp_path / 'big.png'
    Image.new('RGB', (64, 64), 'black').save(path)
    monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 10)
    with pytest.raises(ImageLoadError):
        load_image(str(path))
