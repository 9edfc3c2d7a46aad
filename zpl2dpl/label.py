#!/usr/bin/env python

import re

from .utils import to_dpl_position, to_dpl_size

STX = '\x02'
CR = '\r'


class Label:
    '''
    Used to build a DPL label.

    all positions and sizes are given in printer dots; positions are written
    as 4-digit fields, so anything outside 0..9999 raises PositionError and
    leaves the label unchanged.
    '''

    # font 1, width and height multiplier 1, rotation 1, no scaling
    TEXT_FORMAT = '1211000'

    def __init__(self, config='D11'):
        """
        Creates one DPL label.

        *config* is emitted right after the start of label, 'D11' selects
        dot size 1x1.
        """
        self.config = config
        self.images = ''
        self.code = ''

    def store_image(self, name, data):
        """
        stores a monochrome hex image (see raster.encode_image) as *name*

        image storage always precedes the layout in dumpDPL(), so a later
        recall_image() finds the image resident.
        """
        assert re.fullmatch(r'\w+', name), "image name may only contain word characters"
        assert re.fullmatch(r'[0-9A-F]*', data), "image data must be uppercase hex"
        self.images += 'ID%s%s%s%s' % (name, CR, data, CR)

    def write_text(self, x, y, text):
        self.code += '%s%s%s%s%s' % (self.TEXT_FORMAT, to_dpl_position(y),
                                     to_dpl_position(x), text, CR)

    def barcode(self, x, y, code, barcode_type='C'):
        """
        barcode_type 'Q' (or 'qrcode') writes a QR code, anything else is
        written as the symbology of a linear barcode
        """
        y, x = to_dpl_position(y), to_dpl_position(x)
        if barcode_type in ('Q', 'qrcode'):
            self.code += 'B Q,M,S7%s,%s,d2,%s%s' % (y, x, code, CR)
        else:
            self.code += 'B%s%s%s%s%s' % (barcode_type, y, x, code, CR)

    def draw_box(self, x, y, width, height, thickness=1):
        self.code += 'E%s,%s,%s,%s,%s,%s%s' % (
            to_dpl_position(y), to_dpl_position(x),
            to_dpl_position(y + height), to_dpl_position(x + width),
            to_dpl_size(thickness), to_dpl_size(thickness), CR)

    def draw_circle(self, x, y, diameter, thickness=1):
        self.code += 'C%s,%s,%s,%s%s' % (to_dpl_position(y), to_dpl_position(x),
                                         to_dpl_size(diameter),
                                         to_dpl_size(thickness), CR)

    def draw_line(self, x, y, width, height, thickness=1):
        """diagonal line from (x, y) to (x + width, y + height)"""
        self.code += 'X%s,%s,%s,%s,%s%s' % (
            to_dpl_position(y), to_dpl_position(x),
            to_dpl_position(y + height), to_dpl_position(x + width),
            to_dpl_size(thickness), CR)

    def recall_image(self, x, y, name):
        self.code += 'Y%s,%s,%s%s' % (to_dpl_position(y), to_dpl_position(x), name, CR)

    def dumpDPL(self):
        return STX + 'L' + CR + self.config + CR + self.images + self.code + 'E' + CR
