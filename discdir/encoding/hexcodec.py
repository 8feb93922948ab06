"""
Hexadecimal text is how people type and read byte data; it is never stored or
sent over the wire. This module converts between such text and
:class:`~discdir.encoding.ByteSequence` values.

A lone trailing nibble is padded on the left: ``"f"`` decodes to ``0x0f``,
``"abc"`` to ``0x0a 0xbc``.
"""
import re
import typing as t

from .errors import InvalidHexCharset, InvalidLength

if t.TYPE_CHECKING:
    from . import ByteSequence

__all__ = ('decode', 'encode', 'encode_spaced', 'to_byte_literals',
           'validate_hex_charset', 'validate_fixed_length', 'require_length')

PREFIX = '0x'

_non_hex = re.compile(r'[^0-9a-fA-F]')
_whitespace = re.compile(r'\s+')


def _strip_prefix(text: str, strict: bool = True) -> str:
    if text.startswith(PREFIX) or (not strict and text.startswith(PREFIX.upper())):
        return text[len(PREFIX):]
    return text


def decode(text: str, strict: bool = True) -> 'ByteSequence':
    """ Decodes hexadecimal text into a byte sequence.

    Args:
        text: Hex digits, optionally prefixed with ``0x``; case-insensitive.
        strict: If false, surrounding and embedded whitespace is ignored and
            an upper-case ``0X`` prefix is accepted as well.

    Returns:
        The decoded byte sequence; empty for empty input.

    Raises:
        InvalidHexCharset: If any character after the prefix is not a hex digit.
    """
    from . import ByteSequence

    if not strict:
        text = text.strip()
    digits = _strip_prefix(text, strict)
    if not strict:
        digits = _whitespace.sub('', digits)
    if match := _non_hex.search(digits):
        raise InvalidHexCharset(digits, match.start())
    if len(digits) % 2:
        digits = '0' + digits
    return ByteSequence(bytes.fromhex(digits))


def encode(data: bytes | t.Iterable[int], sep: str = '') -> str:
    """ Renders bytes as lower-case hex, two zero-padded digits per byte.

    Args:
        data: Bytes to render.
        sep: Separator inserted between byte pairs; none by default.
    """
    return sep.join(f'{byte:02x}' for byte in bytes(data))


def encode_spaced(data: bytes | t.Iterable[int]) -> str:
    """ Display variant of :func:`encode` with a space between bytes. """
    return encode(data, ' ')


def to_byte_literals(data: bytes | t.Iterable[int]) -> str:
    """ Renders bytes as a comma separated list of ``0x..`` literals, ready to
    paste into transaction building code. """
    return ', '.join(f'0x{byte:02x}' for byte in bytes(data))


def validate_hex_charset(text: str) -> bool:
    """ Returns whether `text`, without an optional ``0x`` prefix, consists of
    hex digits only. Never raises. """
    return _non_hex.search(_strip_prefix(text)) is None


def validate_fixed_length(data: bytes, expected: int) -> bool:
    """ Returns whether `data` is exactly `expected` bytes long. """
    return len(data) == expected


def require_length(data: bytes, expected: int) -> None:
    """ Raises :class:`InvalidLength` unless `data` is exactly `expected` bytes long. """
    if not validate_fixed_length(data, expected):
        raise InvalidLength(len(data), expected)
