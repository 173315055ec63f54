"""
Byte-buffer decoding for uploaded price lists.

Accounting packages export price lists as UTF-8, UTF-8 with BOM, or UTF-16
(with or without BOM) depending on version and platform. The checks below run
in order and the first one that applies wins.
"""

import logging

from app.core.exceptions import PriceListDecodeError

logger = logging.getLogger(__name__)

BOM_CHAR = "\ufeff"
UTF8_BOM = b"\xef\xbb\xbf"
UTF16_LE_BOM = b"\xff\xfe"
UTF16_BE_BOM = b"\xfe\xff"

FIRST_LINE_SAMPLE_LENGTH = 120


def _strip_bom(text: str) -> str:
    return text[1:] if text.startswith(BOM_CHAR) else text


def _try_decode(data: bytes, codec: str):
    try:
        return data.decode(codec)
    except UnicodeDecodeError:
        return None


def decode_buffer(data: bytes) -> str:
    """
    Decode an uploaded buffer to text with any byte order mark removed.

    Order of checks:
    1. UTF-8 BOM
    2. UTF-16LE BOM
    3. UTF-16BE BOM
    4. BOM-less UTF-16: more than 4 bytes and a null in either of the first two
       bytes; LE is tried first, then BE
    5. UTF-8 with replacement characters (never fails)

    Raises:
        PriceListDecodeError: if the result still contains NUL characters,
        which means the upload is binary (e.g. a spreadsheet) rather than text.
    """
    text = None

    if data.startswith(UTF8_BOM):
        text = _try_decode(data[3:], "utf-8")
    elif data.startswith(UTF16_LE_BOM):
        text = _try_decode(data[2:], "utf-16-le")
    elif data.startswith(UTF16_BE_BOM):
        text = _try_decode(data[2:], "utf-16-be")

    if text is None and len(data) > 4 and (data[0] == 0 or data[1] == 0):
        text = _try_decode(data, "utf-16-le")
        if text is None:
            text = _try_decode(data, "utf-16-be")

    if text is None:
        text = data.decode("utf-8", errors="replace")

    text = _strip_bom(text)

    if "\x00" in text:
        logger.warning(f"Rejected upload that is not text (hint {encoding_hint(data)})")
        raise PriceListDecodeError(
            "File is not readable as text",
            first_line=first_non_empty_line(text.replace("\x00", "")),
        )

    return text


def encoding_hint(data: bytes) -> str:
    """Hex of the first two bytes, returned to the uploader for diagnostics."""
    return data[:2].hex()


def first_non_empty_line(text: str) -> str:
    """First line with visible content, truncated for error messages."""
    for line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        line = _strip_bom(line).strip()
        if line:
            return line[:FIRST_LINE_SAMPLE_LENGTH]
    return ""
