import pytest

from app.core.exceptions import PriceListDecodeError
from app.services.delimited_parser import parse_delimited
from app.services.encoding import decode_buffer, encoding_hint, first_non_empty_line

TEXT = "Item Number\tItem Name\tSelling Price\nA100\tWidget\t$5.00\nB200\tGadget\t$7.25\n"


def test_plain_utf8():
    assert decode_buffer(TEXT.encode("utf-8")) == TEXT


def test_utf8_bom_is_removed():
    assert decode_buffer(b"\xef\xbb\xbf" + TEXT.encode("utf-8")) == TEXT


def test_utf16_le_with_bom():
    assert decode_buffer(b"\xff\xfe" + TEXT.encode("utf-16-le")) == TEXT


def test_utf16_be_with_bom():
    assert decode_buffer(b"\xfe\xff" + TEXT.encode("utf-16-be")) == TEXT


def test_utf16_le_without_bom_is_detected_from_nulls():
    assert decode_buffer(TEXT.encode("utf-16-le")) == TEXT


def test_utf16_le_and_utf8_parse_to_identical_rows():
    utf16 = parse_delimited(decode_buffer(b"\xff\xfe" + TEXT.encode("utf-16-le")))
    utf8 = parse_delimited(decode_buffer(TEXT.encode("utf-8")))
    assert utf16.rows == utf8.rows
    assert utf16.headers == utf8.headers
    assert len(utf8.rows) == 2


def test_invalid_utf8_falls_back_with_replacement_characters():
    text = decode_buffer(b"Item Number,Item Name\nA1,Caf\xe9\n")
    assert text.startswith("Item Number")
    assert "\ufffd" in text


def test_binary_upload_is_rejected():
    with pytest.raises(PriceListDecodeError):
        decode_buffer(b"PK\x03\x04\x14\x00\x06\x00\x08\x00\x00\x00!\x00")


def test_encoding_hint_is_first_two_bytes_as_hex():
    assert encoding_hint(b"\xff\xfeI\x00") == "fffe"
    assert encoding_hint(b"") == ""


def test_first_non_empty_line_is_truncated():
    text = "\n\n  \n" + "x" * 200 + "\nsecond"
    assert first_non_empty_line(text) == "x" * 120
