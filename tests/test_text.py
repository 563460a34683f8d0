import pytest

from vcardscan.text import (
    capitalize,
    decode_base64,
    decode_quoted_printable,
    decode_vcard_text,
    split_list_value,
    strip_data_uri,
    unescape,
)


@pytest.mark.parametrize('raw, expected', [
    ('plain', 'plain'),
    ('a\\\\b', 'a\\b'),
    ('a\\,b', 'a,b'),
    ('line1\\nline2', 'line1\nline2'),
    ('line1\\Nline2', 'line1\nline2'),
    ('a\\;b', 'a;b'),
    ('a\\xb', 'axb'),
    ('trailing\\', 'trailing\\'),
])
def test_unescape(raw, expected):
    assert unescape(raw) == expected


def test_split_list_value_without_separator():
    assert split_list_value('a\\,b\\,c') is None


def test_split_list_value_respects_backslash_runs():
    assert split_list_value('a,b,c') == ['a', 'b', 'c']
    assert split_list_value('a\\\\,b') == ['a\\\\', 'b']
    assert split_list_value('a\\\\\\,b') is None
    assert split_list_value('a,,b') == ['a', '', 'b']


def test_split_list_value_drops_trailing_empty_parts():
    assert split_list_value('a,b,') == ['a', 'b']
    assert split_list_value('a,,') == ['a']
    assert split_list_value(',') == []
    assert decode_vcard_text('a,b,') == ['a', 'b']


def test_decode_escaped_commas_is_single_string():
    assert decode_vcard_text('a\\,b\\,c') == 'a,b,c'


def test_decode_bare_commas_is_list():
    assert decode_vcard_text('a,b,c') == ['a', 'b', 'c']


def test_decode_list_elements_are_unescaped():
    assert decode_vcard_text('one\\nline,two\\,three') == ['one\nline', 'two,three']


def test_decode_quoted_printable():
    assert decode_quoted_printable('=41=3d=3D') == 'A=='
    assert decode_vcard_text('caf=C3=A9', 'QUOTED-PRINTABLE') == 'café'


def test_decode_utf8_from_latin1_lexing():
    assert decode_vcard_text('Jos\xc3\xa9') == 'José'


def test_decode_invalid_utf8_is_replaced():
    assert decode_vcard_text('bad\xff') == 'bad\ufffd'


@pytest.mark.parametrize('encoding', ['b', 'B', 'base64', 'BASE64'])
def test_decode_base64_returns_bytes(encoding):
    assert decode_vcard_text('SGVsbG8=', encoding) == b'Hello'


def test_decode_base64_is_lenient():
    assert decode_base64('SGVs\r\nbG8') == b'Hello'
    assert decode_base64('SGVsbG8') == b'Hello'


def test_decode_base64_ignores_leftover_character():
    assert decode_base64('SGVsb') == b'Hel'


def test_strip_data_uri():
    assert strip_data_uri('data:image/jpeg;base64,SGVsbG8=') == ('SGVsbG8=', 'ImageJpeg')
    assert strip_data_uri('http://example.com/a.jpg') == ('http://example.com/a.jpg', None)


def test_capitalize():
    assert capitalize('hOME') == 'Home'
    assert capitalize('') == ''
