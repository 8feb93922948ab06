from .transport import Connection, Transport

__all__ = ('Connection', 'Transport')
