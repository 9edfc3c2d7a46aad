#!/usr/bin/env python

import io
import logging
import os.path
from urllib.request import urlopen

from PIL import Image

log = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 128


class ImageLoadError(IOError):
    """Raised when an image cannot be fetched or decoded."""


def load_image(uri, timeout=10):
    '''
    Fetches and decodes the image behind *uri*.

    http(s) and data URLs are read through urlopen, anything else is opened
    as a local file. Returns a fully loaded PIL.Image.
    '''
    try:
        if '://' in uri or uri.startswith('data:'):
            log.debug('Fetch image: {}'.format(uri[:80]))
            res = urlopen(uri, timeout=timeout).read()
            image = Image.open(io.BytesIO(res))
        else:
            image = Image.open(os.path.expanduser(uri))
        image.load()
    except (IOError, ValueError, Image.DecompressionBombError) as e:
        raise ImageLoadError("Failed to load image at: {} ({})".format(uri[:80], e))
    return image


def image_to_bitmap(image, threshold=DEFAULT_THRESHOLD):
    '''
    converts *image* (of type PIL.Image) to a monochrome bitmap

    a pixel is ink (1) when the plain average of its red, green and blue
    channels is below *threshold*, otherwise it is background (0). Alpha is
    ignored.

    returns (bits, width, height) with bits in row-major order
    '''
    assert 0 <= threshold <= 256, "threshold must be between 0 and 256"
    rgb = image.convert('RGB')
    width, height = rgb.size
    data = rgb.tobytes()
    # (r + g + b) / 3 < threshold without leaving integer arithmetic
    limit = 3 * threshold
    bits = bytearray(width * height)
    for j, i in enumerate(range(0, len(data), 3)):
        if data[i] + data[i + 1] + data[i + 2] < limit:
            bits[j] = 1
    return bits, width, height


def bitmap_to_dpl_hex(bits, width, height):
    '''
    packs a monochrome bitmap into the DPL hex representation

    bits are packed most significant first, every row starts a new byte and
    an incomplete last byte of a row is padded with zero bits.
    '''
    assert len(bits) == width * height, "bitmap size does not match dimensions"
    hex_data = []
    for y in range(height):
        row = bits[y * width:(y + 1) * width]
        byte = 0
        bit_count = 0
        for bit in row:
            byte = (byte << 1) | bit
            bit_count += 1
            if bit_count == 8:
                hex_data.append("%02X" % byte)
                byte = 0
                bit_count = 0
        if bit_count:
            hex_data.append("%02X" % (byte << (8 - bit_count)))
    return "".join(hex_data)


def encode_image(image, threshold=DEFAULT_THRESHOLD):
    """Thresholds and bit-packs *image*, returning the DPL hex string."""
    return bitmap_to_dpl_hex(*image_to_bitmap(image, threshold))
