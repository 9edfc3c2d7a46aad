"""Tests for zpl2dpl.utils.

Covers:
    - Zebra run-length decompression (upper and lower count ranges)
    - malformed payloads raise DecodeError
    - 4-digit DPL position fields and their range policy
    - thickness and diameter values

Run:
    pytest tests/test_utils.py -v
"""

import pytest

from zpl2dpl.utils import (ZPL_COMPRESS_MAP, DecodeError, PositionError,
                           decompress_zpl_data, format_number, parse_pixels,
                           to_dpl_position, to_dpl_size)


def test_count_ranges_are_disjoint():
    upper = [c for c in ZPL_COMPRESS_MAP if c.isupper()]
    lower = [c for c in ZPL_COMPRESS_MAP if c.islower()]
    assert len(upper) == 19
    assert len(lower) == 19
    assert sorted(ZPL_COMPRESS_MAP[c] for c in upper) == list(range(1, 20))
    assert sorted(ZPL_COMPRESS_MAP[c] for c in lower) == list(range(20, 381, 20))


def test_upper_range_tokens():
    assert decompress_zpl_data('G0H1') == '011'
    assert decompress_zpl_data('YF') == 'F' * 19


def test_lower_range_tokens():
    assert decompress_zpl_data('gc') == 'C' * 20
    assert decompress_zpl_data('y0') == '0' * 380


def test_output_length_is_sum_of_counts():
    payload = 'A' + 'K0' + 'hF' + '9' + 'MB'
    assert len(decompress_zpl_data(payload)) == 1 + 5 + 40 + 1 + 7


def test_plain_characters_pass_through_uppercased():
    assert decompress_zpl_data('00ff7e') == '00FF7E'
    # 'z' and the row shorthands are not count characters here
    assert decompress_zpl_data('z,:!') == 'Z,:!'


def test_token_always_consumes_next_character():
    assert decompress_zpl_data('HG') == 'GG'


def test_trailing_token_raises():
    with pytest.raises(DecodeError):
        decompress_zpl_data('FFG')
    with pytest.raises(DecodeError):
        decompress_zpl_data('g')


def test_empty_payload():
    assert decompress_zpl_data('') == ''


@pytest.mark.parametrize('value, expected', [
    (0, '0000'),
    (7, '0007'),
    (150, '0150'),
    (9999, '9999'),
    ('150px', '0150'),
    (' 42 ', '0042'),
    (12.5, '0013'),
    (12.4, '0012'),
    ('10.6px', '0011'),
])
def test_dpl_position(value, expected):
    assert to_dpl_position(value) == expected


@pytest.mark.parametrize('value', [10000, 12345, -1, '-5px', float('inf')])
def test_dpl_position_out_of_range(value):
    with pytest.raises(PositionError):
        to_dpl_position(value)


def test_dpl_position_not_a_number():
    with pytest.raises(ValueError):
        to_dpl_position('left')


def test_parse_pixels():
    assert parse_pixels('20px') == 20.0
    assert parse_pixels(3) == 3.0


def test_format_number():
    assert format_number(3.0) == '3'
    assert format_number(2) == '2'
    assert format_number(2.5) == '2.5'


@pytest.mark.parametrize('value, expected', [(2.0, '2'), ('3px', '3'), (0, '0'), (1.5, '1.5')])
def test_dpl_size(value, expected):
    assert to_dpl_size(value) == expected


@pytest.mark.parametrize('value', [float('inf'), float('nan'), -1, '-2px', 'inf'])
def test_dpl_size_invalid(value):
    with pytest.raises(ValueError):
        to_dpl_size(value)
