class EncodingError(Exception):
    """ A general byte data encoding error. """


class InvalidHexCharset(EncodingError):
    """ A character outside `[0-9a-fA-F]` was found in hexadecimal text.

    Args:
        text: The text that failed to decode.
        position: Index of the offending character, counted after the prefix.
    """

    def __init__(self, text: str, position: int):
        self.text = text
        self.position = position
        self.char = text[position] if 0 <= position < len(text) else ''
        super().__init__(f"Invalid hex character {self.char!r} at position {position}")


class InvalidLength(EncodingError):
    """ A decoded byte sequence has a length other than required.

    Args:
        actual: Number of bytes received.
        expected: Number of bytes required.
    """

    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(f"Expected {expected} bytes, got {actual}")


class WireFormatError(EncodingError):
    """ Byte data received over the wire is not an array of integers in [0, 255]. """
