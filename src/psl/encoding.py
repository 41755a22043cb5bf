"""Normalize raw PSL bytes into clean UTF-8 lines.

The canonical PSL encoding is plain UTF-8 with no BOM. To give useful
errors for files mangled by older Windows tools, UTF-16LE and UTF-16BE
input (with or without a BOM) is also accepted and decoded, with a
diagnostic describing the deviation.
"""

import logging

from .errors import (
    DecodeError,
    DOSNewlineError,
    InvalidEncodingError,
    InvalidUTF8Error,
    LeadingWhitespaceError,
    PSLError,
    TrailingWhitespaceError,
    UTF8BOMError,
)
from .source import Source

logger = logging.getLogger(__name__)

BOM_UTF8 = b"\xef\xbb\xbf"
BOM_UTF16BE = b"\xfe\xff"
BOM_UTF16LE = b"\xff\xfe"

UTF8 = "utf-8"
UTF16BE = "utf-16-be"
UTF16LE = "utf-16-le"

# Only the first few hundred bytes (100 UTF-16 characters) are inspected.
GUESS_CHECK_LIMIT = 200
# Zero bytes to collect before deciding, and how many of them must sit on
# one parity to call it UTF-16.
GUESS_DECISION_THRESHOLD = 20
GUESS_UTF16_THRESHOLD = 15

# Unicode White_Space characters. str.strip() with no argument also removes
# the U+001C-U+001F separators, which are not whitespace.
WHITESPACE = (
    "\t\n\v\f\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


def guess_encoding(data: bytes) -> str:
    """Guess whether BOM-less data is UTF-8, UTF-16BE or UTF-16LE.

    Mostly-ASCII UTF-8 has no zero bytes, while ASCII encoded as UTF-16
    has a zero byte in every other position. The offset parity of those
    zeros gives the byte order. A handful of zeros is not enough: UTF-8
    with a few U+0000 codepoints would decode to garbage as UTF-16, so
    wait for a clear pattern before abandoning UTF-8.

    Returns a Python codec name: UTF8, UTF16BE or UTF16LE.
    """
    even_zeros = odd_zeros = 0
    for i, b in enumerate(data[:GUESS_CHECK_LIMIT]):
        if b != 0:
            continue
        if i % 2 == 0:
            even_zeros += 1
        else:
            odd_zeros += 1

        if even_zeros + odd_zeros < GUESS_DECISION_THRESHOLD:
            continue
        if even_zeros > GUESS_UTF16_THRESHOLD:
            return UTF16BE
        if odd_zeros > GUESS_UTF16_THRESHOLD:
            return UTF16LE
        # Lots of zeros but no parity bias.
        return UTF8

    return UTF8


def _detect(data: bytes) -> tuple[bytes, str, list[PSLError]]:
    """Pick a codec for data, stripping any BOM."""
    if data.startswith(BOM_UTF8):
        return data[len(BOM_UTF8):], UTF8, [UTF8BOMError()]
    if data.startswith(BOM_UTF16BE):
        return data[len(BOM_UTF16BE):], UTF16BE, [InvalidEncodingError("UTF-16BE")]
    if data.startswith(BOM_UTF16LE):
        return data[len(BOM_UTF16LE):], UTF16LE, [InvalidEncodingError("UTF-16LE")]

    codec = guess_encoding(data)
    if codec == UTF16BE:
        return data, codec, [InvalidEncodingError("UTF-16BE (guessed)")]
    if codec == UTF16LE:
        return data, codec, [InvalidEncodingError("UTF-16LE (guessed)")]
    return data, codec, []


def normalize(data: bytes) -> tuple[tuple[str, ...], list[PSLError]]:
    """Split data into sanitized lines.

    Every returned line is valid UTF-8 text with no line terminator and no
    leading or trailing whitespace. Invalid byte sequences are replaced
    with U+FFFD. Deviations from the canonical encoding are returned as
    diagnostics; they point at the line before it was cleaned up.

    Always returns usable lines, even for garbage input.
    """
    data, codec, errors = _detect(bytes(data))
    logger.debug("decoding %d bytes as %s", len(data), codec)

    try:
        text = data.decode(codec, errors="replace")
    except (UnicodeError, LookupError) as exc:
        errors.append(DecodeError(str(exc)))
        return (), errors

    if not text:
        return (), errors

    lines = text.split("\n")
    for i, raw in enumerate(lines):
        src = Source((raw,), i)
        line = raw
        if "\ufffd" in line:
            errors.append(InvalidUTF8Error(src))
        if line.endswith("\r"):
            line = line[:-1]
            errors.append(DOSNewlineError(src))
        if line.rstrip(WHITESPACE) != line:
            line = line.rstrip(WHITESPACE)
            errors.append(TrailingWhitespaceError(src))
        if line.lstrip(WHITESPACE) != line:
            line = line.lstrip(WHITESPACE)
            errors.append(LeadingWhitespaceError(src))
        lines[i] = line

    return tuple(lines), errors
