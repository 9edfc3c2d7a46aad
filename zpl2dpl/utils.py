import math

# Zebra-specific run-length decoding mapping,
# where run lengths 1–19 are encoded using 'G' to 'Y' and
# multiples of 20 up to 380 using 'g' to 'y'.
# See Zebra ZPL II Programming Guide for details.
ZPL_COMPRESS_MAP = {
    "G": 1,
    "H": 2,
    "I": 3,
    "J": 4,
    "K": 5,
    "L": 6,
    "M": 7,
    "N": 8,
    "O": 9,
    "P": 10,
    "Q": 11,
    "R": 12,
    "S": 13,
    "T": 14,
    "U": 15,
    "V": 16,
    "W": 17,
    "X": 18,
    "Y": 19,
    "g": 20,
    "h": 40,
    "i": 60,
    "j": 80,
    "k": 100,
    "l": 120,
    "m": 140,
    "n": 160,
    "o": 180,
    "p": 200,
    "q": 220,
    "r": 240,
    "s": 260,
    "t": 280,
    "u": 300,
    "v": 320,
    "w": 340,
    "x": 360,
    "y": 380,
}

DPL_POSITION_DIGITS = 4
DPL_POSITION_MAX = 10 ** DPL_POSITION_DIGITS - 1


class DecodeError(ValueError):
    """Raised for a compressed graphic payload that cannot be expanded."""


class PositionError(ValueError):
    """Raised for a coordinate that does not fit a DPL position field."""


def decompress_zpl_data(zpl_data: str) -> str:
    """
    Expands ZPL (Zebra Programming Language) ASCII hex graphic data that was
    compressed with the Zebra run-length scheme.

    Parameters
    ----------
    zpl_data : str
        The compressed hex payload of a ~DG or ^GF command, with line breaks
        already removed.

    Returns
    -------
    str
        The plain hex string, upper-cased.

    Raises
    ------
    DecodeError
        If the payload ends with a count character that has no literal.

    Notes
    -----
    - Every count character repeats exactly the one character following it;
      stacked counts such as ``hK0`` are not combined.
    - Characters that are not count characters are copied unchanged.

    Examples
    --------
    >>> decompress_zpl_data('G0H1')
    '011'
    >>> decompress_zpl_data('gF') == 'F' * 20
    True
    """

    unzipped_data = ""
    i = 0
    while i < len(zpl_data):
        char = zpl_data[i]
        count = ZPL_COMPRESS_MAP.get(char)
        if count is None:
            unzipped_data += char
            i += 1
            continue
        if i + 1 >= len(zpl_data):
            raise DecodeError("count character %r at offset %i has no data character"
                              % (char, i))
        unzipped_data += zpl_data[i + 1] * count
        i += 2
    return unzipped_data.upper()


def parse_pixels(value) -> float:
    """
    Reads a pixel value given as a number or as a CSS length like '150px'.
    """
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if text.endswith("px"):
        text = text[:-2]
    try:
        return float(text)
    except ValueError:
        raise ValueError("invalid pixel value %r" % (value,))


def format_number(value) -> str:
    """Integral values are written without a decimal point."""
    value = float(value)
    if value.is_integer():
        return "%i" % value
    return repr(value)


def to_dpl_size(value) -> str:
    """
    Writes a thickness or diameter; negative and non-finite values raise
    ValueError.
    """
    size = parse_pixels(value)
    if not math.isfinite(size) or size < 0:
        raise ValueError("invalid size %r" % (value,))
    return format_number(size)


def to_dpl_position(value) -> str:
    """
    Converts a pixel coordinate to the 4-digit zero-padded field used by DPL
    positions, e.g. 7 -> '0007' and '150px' -> '0150'.

    Fractional pixels are rounded half up. Coordinates below zero or above
    9999 raise PositionError instead of producing a malformed field.
    """
    pixels = parse_pixels(value)
    if not math.isfinite(pixels):
        raise PositionError("position %r is not a finite number" % (value,))
    position = int(pixels + 0.5) if pixels >= 0 else -int(-pixels + 0.5)
    if position < 0 or position > DPL_POSITION_MAX:
        raise PositionError("position %s outside 0..%i" % (format_number(pixels),
                                                            DPL_POSITION_MAX))
    return "%0*i" % (DPL_POSITION_DIGITS, position)
