#!/usr/bin/env python

import logging

from PIL import Image

from .converter import Diagnostic, Translation
from .elements import (BarcodeElement, BoxElement, CircleElement, ImageElement,
                       LineElement, TextElement, UnsupportedElement, resolve_element)
from .label import Label
from .raster import DEFAULT_THRESHOLD, encode_image, load_image
from .utils import PositionError

log = logging.getLogger(__name__)


class DplLayoutPrinter:
    '''
    Converts the placed elements of a label design into a DPL script.

    Images are fetched, thresholded and stored one after the other before the
    layout is written, so every image recall finds its image resident. An
    element that cannot be translated is skipped and reported.
    '''

    def __init__(self, loader=load_image, threshold=DEFAULT_THRESHOLD, cancel=None,
                 config='D11'):
        """
        *loader* maps an image URI to a PIL.Image and raises on failure.
        *cancel* is an optional threading.Event; once set, images that are not
        loaded yet are skipped.
        """
        self.loader = loader
        self.threshold = threshold
        self.cancel = cancel
        self.config = config

    def print(self, placed_elements):
        label = Label(config=self.config)
        diagnostics = []

        elements = []
        for i, placed in enumerate(placed_elements):
            try:
                elements.append((i, resolve_element(placed)))
            except UnsupportedElement as e:
                log.warning(str(e))
                diagnostics.append(Diagnostic('unsupported', i, placed.tag, str(e)))
            except ValueError as e:
                log.warning('Skipping {}: {}'.format(placed.tag, e))
                diagnostics.append(Diagnostic('syntax', i, placed.tag, str(e)))

        names = self._store_images(label, elements, diagnostics)

        for i, element in elements:
            try:
                self._emit(label, element, names.get(i))
            except PositionError as e:
                log.warning('Skipping {}: {}'.format(type(element).__name__, e))
                diagnostics.append(Diagnostic('position', i, type(element).__name__,
                                              str(e)))
            except ValueError as e:
                log.warning('Skipping {}: {}'.format(type(element).__name__, e))
                diagnostics.append(Diagnostic('syntax', i, type(element).__name__, str(e)))

        return Translation(label.dumpDPL(), diagnostics)

    def _store_images(self, label, elements, diagnostics):
        '''
        loads and stores every image element in order, one at a time

        every logical name is used once: generated names skip the ones given
        explicitly, an explicit name given twice skips the later element.
        returns {element index: logical name} for the stored images
        '''
        explicit = set(e.name for _, e in elements
                       if isinstance(e, ImageElement) and e.name)
        used = set()
        names = {}
        count = 0
        for i, element in elements:
            if not isinstance(element, ImageElement):
                continue
            if element.name:
                name = element.name
                if name in used:
                    log.warning('Duplicate image name {}'.format(name))
                    diagnostics.append(Diagnostic('syntax', i, name,
                                                  'image name %s is already used' % name))
                    continue
            else:
                count += 1
                while 'IMG%03i' % count in explicit:
                    count += 1
                name = 'IMG%03i' % count
            used.add(name)

            if self._cancelled():
                log.warning('Image {} cancelled'.format(name))
                diagnostics.append(Diagnostic('cancelled', i, name, 'image load cancelled'))
                continue
            try:
                image = self.loader(element.src)
            except (IOError, ValueError, Image.DecompressionBombError) as e:
                log.error('Failed to load image {}: {}'.format(name, e))
                diagnostics.append(Diagnostic('resource', i, name, str(e)))
                continue
            # a load that finished after cancellation is discarded
            if self._cancelled():
                log.warning('Image {} cancelled'.format(name))
                diagnostics.append(Diagnostic('cancelled', i, name, 'image load cancelled'))
                continue
            try:
                data = encode_image(image, self.threshold)
            except (IOError, ValueError, Image.DecompressionBombError) as e:
                log.error('Failed to convert image {}: {}'.format(name, e))
                diagnostics.append(Diagnostic('resource', i, name, str(e)))
                continue

            label.store_image(name, data)
            names[i] = name
        return names

    def _emit(self, label, element, image_name):
        if isinstance(element, TextElement):
            label.write_text(element.x, element.y, element.text)
        elif isinstance(element, BarcodeElement):
            label.barcode(element.x, element.y, element.data, element.symbology)
        elif isinstance(element, BoxElement):
            label.draw_box(element.x, element.y, element.width, element.height,
                           element.thickness)
        elif isinstance(element, CircleElement):
            label.draw_circle(element.x, element.y, element.diameter, element.thickness)
        elif isinstance(element, LineElement):
            label.draw_line(element.x, element.y, element.width, element.height,
                            element.thickness)
        elif isinstance(element, ImageElement) and image_name:
            label.recall_image(element.x, element.y, image_name)

    def _cancelled(self):
        return self.cancel is not None and self.cancel.is_set()
