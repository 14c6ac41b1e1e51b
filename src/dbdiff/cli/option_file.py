"""
MySQL-style option file parsing.

Supports the subset of the my.cnf format that connection settings need:

    # comment            ; comment            [client]
    host = db.example.com
    password = "s3cr#t"   # quoted values may contain '#'
    user = app\sreader     # \s is a space

Section headers are ignored, so every key in the file is read. When a key
repeats, the last value wins.
"""

import logging
from collections.abc import Iterable

from ..errors import ConfigError

logger = logging.getLogger(__name__)

ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "\\": "\\",
    "s": " ",
}

WHITESPACE = " \t\n\r\f\v"


def unescape_value(text: str, terminator: str) -> str:
    """
    Decode escapes in a value and cut it at the first unescaped terminator.

    Unknown escapes keep their backslash, except an escaped terminator which
    becomes the bare character. A trailing lone backslash is kept.
    """
    result = []
    escaped = False

    for char in text:
        if escaped:
            if char in ESCAPES:
                result.append(ESCAPES[char])
            else:
                if char != terminator:
                    result.append("\\")
                result.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == terminator:
            break
        else:
            result.append(char)

    if escaped:
        result.append("\\")

    return "".join(result)


def strip_comment(text: str) -> str:
    """Drop an unquoted value's trailing comment and the whitespace before it."""
    escaped = False
    for position, char in enumerate(text):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "#":
            text = text[:position]
            break
    return text.rstrip(WHITESPACE)


def parse_option_lines(lines: Iterable[str]) -> dict[str, str]:
    """
    Parse option-file lines into a key/value mapping.

    Args:
        lines: Lines of the file

    Returns:
        Mapping of option name to decoded value
    """
    entries: dict[str, str] = {}

    for line in lines:
        line = line.strip(WHITESPACE)
        if not line or line[0] in "#;[":
            continue

        key, sep, value = line.partition("=")
        if not sep or "#" in key:
            # no assignment, or the '=' belongs to a trailing comment
            continue

        key = key.strip(WHITESPACE)
        value = value.strip(WHITESPACE)

        if value[:1] in ("'", '"'):
            entries[key] = unescape_value(value[1:], value[0])
        else:
            # escaped trailing spaces (\s) survive the strip
            entries[key] = unescape_value(strip_comment(value), "#")

    return entries


def read_option_file(path: str) -> dict[str, str]:
    """
    Read and parse an option file.

    Raises:
        ConfigError: If the file cannot be opened
    """
    try:
        with open(path, encoding="utf-8") as f:
            entries = parse_option_lines(f)
    except OSError as e:
        raise ConfigError(f"cannot open config file {path}") from e

    logger.debug(f"Read {len(entries)} options from {path}")
    return entries
