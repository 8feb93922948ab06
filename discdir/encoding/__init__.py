"""
The `discdir.encoding` module holds the byte data model and the codecs around
it: hexadecimal text for the human edge, JSON integer arrays for the wire, and
an advisory interpretation for display.
"""
import typing as t

from .errors import EncodingError, InvalidHexCharset, InvalidLength, WireFormatError
from .hexcodec import (decode, encode, encode_spaced, require_length, to_byte_literals,
                       validate_fixed_length, validate_hex_charset)
from .interpret import DataView, classify, describe

__all__ = ('ByteSequence', 'DataView', 'EncodingError', 'InvalidHexCharset', 'InvalidLength',
           'WireFormatError', 'classify', 'decode', 'describe', 'encode', 'encode_spaced',
           'require_length', 'to_byte_literals', 'validate_fixed_length', 'validate_hex_charset')


class ByteSequence(bytes):
    """ An immutable, ordered sequence of 8-bit unsigned integers.

    Hex text is not an attribute of the sequence, only a rendering of it;
    see :meth:`hex_text`.

    Args:
        data: Bytes or an iterable of integers in [0, 255].

    Raises:
        ValueError: If an integer is out of range.
    """

    if t.TYPE_CHECKING:
        def __init__(self, data: bytes | t.Iterable[int] = b''): ...

    def __new__(cls, data: bytes | t.Iterable[int] = b'') -> 'ByteSequence':
        return super().__new__(cls, data)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.hex_text()!r})'

    @classmethod
    def from_hex(cls, text: str, strict: bool = True) -> 'ByteSequence':
        """ Decodes hex text; see :func:`discdir.encoding.hexcodec.decode`. """
        return decode(text, strict)

    @classmethod
    def from_wire(cls, values: t.Any) -> 'ByteSequence':
        """ Builds a sequence from its wire form, a JSON array of integers.

        Raises:
            WireFormatError: If `values` is not a list of integers in [0, 255].
        """
        if not isinstance(values, (list, tuple)):
            raise WireFormatError(f"Byte data must be an array, not {type(values).__name__}")
        for value in values:
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise WireFormatError(f"Byte value out of range: {value!r}")
        return cls(values)

    def to_wire(self) -> list[int]:
        """ Returns the wire form, a list of integers. """
        return list(self)

    def hex_text(self, sep: str = '') -> str:
        """ Lower-case hex rendering without a prefix. """
        return encode(self, sep)

    def classify(self) -> str:
        """ Advisory interpretation; see :func:`discdir.encoding.interpret.classify`. """
        return classify(self)
