"""
Advisory interpretation of byte data. The strings produced here help a person
guess what they are looking at; nothing in the package validates, stores or
branches on them.
"""
import typing as t
from dataclasses import dataclass

from .hexcodec import encode, encode_spaced, to_byte_literals

__all__ = ('DataView', 'classify', 'describe')

DISCRIMINATOR_SIZE = 8
PUBLIC_KEY_SIZE = 32
MAX_VARIANT_INDEX = 10


def classify(data: bytes | t.Sequence[int]) -> str:
    """ Returns a short, human-readable guess about what `data` represents.

    Every length maps to exactly one result; the first matching rule wins.
    """
    size = len(data)
    if size == 0:
        return "Empty data"
    if size == DISCRIMINATOR_SIZE:
        return f"Likely a discriminator ({DISCRIMINATOR_SIZE} bytes)"
    if size == PUBLIC_KEY_SIZE:
        return f"Likely a public key/address ({PUBLIC_KEY_SIZE} bytes)"
    if 1 < size <= DISCRIMINATOR_SIZE and data[0] < MAX_VARIANT_INDEX:
        return f"Possible command/variant index: {data[0]}"
    return f"{size} bytes of data"


@dataclass(frozen=True)
class DataView:
    """ Display form of a byte sequence. """
    hex: str
    spaced: str
    literals: str
    interpretation: str
    size: int


def describe(data: bytes | t.Sequence[int]) -> DataView:
    """ Builds the display form of `data`, recomputing hex text and
    interpretation from the bytes themselves. """
    data = bytes(data)
    return DataView(
        hex=encode(data),
        spaced=encode_spaced(data) or "(No data)",
        literals=to_byte_literals(data),
        interpretation=classify(data),
        size=len(data),
    )
