"""
The *discdir.transport* module contains abstract classes and protocols for
talking to the remote discriminator registry. Concrete implementations move
submissions and query results over the network; this layer only guarantees
that what it sends is an already validated submission and that what it
returns are well-formed records.
"""
import logging
import typing as t
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from discdir.models import Discriminator, Instruction, Submission
from .connection import Connection as BaseConnection
from .errors import ConnectionClosed, TransportError
from .protocols import Connection, Registry

__all__ = ('BaseConnection', 'Connection', 'ConnectionClosed', 'Registry', 'Transport', 'TransportError')

logger = logging.getLogger(__name__)


class Transport(ABC):
    """ An abstract base class with partial implementation of the
    :class:`~discdir.transport.protocols.Registry` protocol. Each operation
    opens its own connection, which is closed when the operation ends.
    """

    def __init__(self):
        self._connections = set()  # type: set[Connection]

    @property
    def active(self) -> bool:
        """ Returns `True` if there are open connections. """
        return len(self._connections) > 0

    def close(self):
        """ Closes all open connections; their pending operations fail
        with :class:`ConnectionClosed`. """
        for connection in tuple(self._connections):
            connection.close()

    def connection(self, *args: t.Any, **kwargs: t.Any) -> AbstractAsyncContextManager[Connection, bool]:
        """ Returns a context manager that opens a registry connection on
        entry and closes it on exit.

        Args:
            args: Reserved positional arguments.
            kwargs: Reserved named arguments.
        """

        @asynccontextmanager
        async def enter_connection_context():
            connection = self._connection_factory(*args, **kwargs)
            assert isinstance(connection, Connection)
            try:
                self._connections.add(connection)
                await connection.open_connection(*args, **kwargs)
                yield connection
            finally:
                self._connections.discard(connection)
                await connection.close_connection()

        return enter_connection_context()

    async def submit(self, submission: Submission, contributor_id: str | None = None) -> None:
        """ Submits a discriminator, with an optional instruction, for a program.

        Args:
            submission: A validated submission.
            contributor_id: Identifier of the contributing user, if known.

        Raises:
            TransportError: With the registry's reason if the submission failed.
        """
        async with self.connection() as connection:
            await connection.send_submission(submission, contributor_id)
        logger.info(f"Program# {submission.program_id}; "
                    f"discriminator {submission.discriminator_data.hex_text()} is submitted")

    async def fetch_by_program(self, program_id: str) -> list[Discriminator]:
        """ Fetches the discriminators registered for a program.

        Raises:
            TransportError: If the registry fails or sends malformed records.
        """
        async with self.connection() as connection:
            discriminators = await connection.recv_discriminators(program_id)
        logger.info(f"Program# {program_id}; {len(discriminators)} discriminators received")
        return discriminators

    async def fetch_instructions_by_discriminator(self, discriminator_id: str) -> list[Instruction]:
        """ Fetches the instructions registered for a discriminator.

        Raises:
            TransportError: If the registry fails or sends malformed records.
        """
        async with self.connection() as connection:
            instructions = await connection.recv_instructions(discriminator_id)
        logger.info(f"Discriminator# {discriminator_id}; {len(instructions)} instructions received")
        return instructions

    async def check_health(self) -> str:
        """ Returns the registry's health message.

        Raises:
            TransportError: If the registry cannot be reached.
        """
        async with self.connection() as connection:
            return await connection.recv_health()

    @abstractmethod
    def _connection_factory(self, *args: t.Any, **kwargs: t.Any) -> Connection:
        """ Must return an object implementing the registry connection protocol
        ``discdir.transport.protocols.Connection``.

        Args:
            args: Reserved positional arguments.
            kwargs: Reserved named arguments.
        """
