"""Placed elements of a label design and their typed variants.

A design surface hands over ``PlacedElement`` records: a type tag, a pixel
position and size (numbers or CSS lengths like ``"150px"``) and a string
attribute map. ``resolve_element`` turns one record into exactly one of the
variants below, so the assembler never looks at raw attributes.
"""

import re
from typing import Mapping, NamedTuple, Optional, Union

from .utils import parse_pixels


class PlacedElement(NamedTuple):
    tag: str
    left: Union[str, float] = 0
    top: Union[str, float] = 0
    width: Optional[Union[str, float]] = None
    height: Optional[Union[str, float]] = None
    attributes: Optional[Mapping[str, str]] = None


class TextElement(NamedTuple):
    x: float
    y: float
    text: str


class BarcodeElement(NamedTuple):
    x: float
    y: float
    data: str
    symbology: str


class BoxElement(NamedTuple):
    x: float
    y: float
    width: float
    height: float
    thickness: float


class CircleElement(NamedTuple):
    x: float
    y: float
    diameter: float
    thickness: float


class LineElement(NamedTuple):
    x: float
    y: float
    width: float
    height: float
    thickness: float


class ImageElement(NamedTuple):
    x: float
    y: float
    src: str
    name: Optional[str]


Element = Union[TextElement, BarcodeElement, BoxElement, CircleElement,
                LineElement, ImageElement]

TAG_ALIASES = {
    'zpl-text': 'text',
    'zpl-barcode': 'barcode',
    'zpl-graphic-box': 'box',
    'zpl-graphic-circle': 'circle',
    'zpl-graphic-diagonal-line': 'diagonal-line',
    'zpl-image': 'image',
}


class UnsupportedElement(ValueError):
    """Raised for a placed element whose tag has no DPL counterpart."""


def _size(value, what, tag):
    if value is None or value == '':
        raise ValueError("%s element needs a %s" % (tag, what))
    return parse_pixels(value)


def _thickness(attributes):
    return parse_pixels(attributes.get('thickness') or '1')


def resolve_element(placed: PlacedElement) -> Element:
    """
    Resolves a raw placed element into its typed variant.

    Raises UnsupportedElement for unknown tags and ValueError for malformed
    positions, sizes or thickness values.
    """
    tag = placed.tag.lower()
    kind = TAG_ALIASES.get(tag, tag)
    attributes = placed.attributes or {}
    x = parse_pixels(placed.left)
    y = parse_pixels(placed.top)

    if kind == 'text':
        return TextElement(x, y, attributes.get('text') or '')
    if kind == 'barcode':
        symbology = attributes.get('type') or 'C'
        if symbology.lower() == 'qrcode':
            symbology = 'qrcode'
        return BarcodeElement(x, y, attributes.get('data') or '', symbology)
    if kind == 'box':
        return BoxElement(x, y, _size(placed.width, 'width', tag),
                          _size(placed.height, 'height', tag), _thickness(attributes))
    if kind == 'circle':
        # the circle is sized by its width
        return CircleElement(x, y, _size(placed.width, 'width', tag),
                             _thickness(attributes))
    if kind == 'diagonal-line':
        return LineElement(x, y, _size(placed.width, 'width', tag),
                           _size(placed.height, 'height', tag), _thickness(attributes))
    if kind == 'image':
        src = attributes.get('src') or ''
        if not src:
            raise ValueError("%s element has no src" % tag)
        name = attributes.get('image-name') or None
        if name is not None and not re.fullmatch(r'\w+', name):
            raise ValueError("invalid image name %r" % name)
        return ImageElement(x, y, src, name)
    raise UnsupportedElement("Unsupported element type: %s" % placed.tag)
