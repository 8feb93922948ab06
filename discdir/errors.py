import typing as t

from discdir.encoding.errors import (EncodingError, InvalidHexCharset, InvalidLength,  # noqa
                                     WireFormatError)
from discdir.transport.errors import ConnectionClosed, TransportError  # noqa

if t.TYPE_CHECKING:
    from discdir.directory import FieldError


class InvalidForm(Exception):
    """ User input failed validation; nothing was sent. """

    def __init__(self, errors: t.Sequence['FieldError']):
        self.errors = tuple(errors)
        super().__init__("; ".join(f"{error.field}: {error.message}" for error in self.errors))


class Superseded(Exception):
    """ A newer request of the same form started; this result is discarded. """
