class TransportError(Exception):
    """ A failure reported by, or on the way to, the remote registry.

    Args:
        reason: Message to show as is.
        status: HTTP status code, if the registry answered.
    """

    def __init__(self, reason: str, status: int | None = None):
        self.reason = reason
        self.status = status
        super().__init__(reason)


class ConnectionClosed(TransportError, ConnectionError):
    """ The registry connection was closed. """

    def __init__(self, reason: str = "Connection closed"):
        super().__init__(reason)
