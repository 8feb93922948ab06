import typing as t
from abc import ABC, abstractmethod

from discdir.encoding.errors import WireFormatError
from discdir.models import Discriminator, Instruction, Submission
from .errors import ConnectionClosed, TransportError

R = t.TypeVar('R')


class Connection(ABC):
    """ This is an abstract base class that defines a partially implemented
    interface for talking to the remote registry. It converts between records
    and their wire form; subclasses only move the wire form.
    """

    def __init__(self):
        self.__connected = False

    @property
    def connected(self) -> bool:
        """ Returns True if the connection has been established. """
        return self.__connected

    def close(self):
        """ Forcibly closes this connection. After calling this method every
        exchange fails with :class:`ConnectionClosed`.
        """
        self.__connected = False

    async def open_connection(self, *args: t.Any, **kwargs: t.Any) -> None:
        """ This method should be extended by subclasses to establish
        the connection to the registry.
        """
        self.__connected = True

    async def close_connection(self) -> None:
        """ This method should be extended by subclasses to release
        the connection to the registry.
        """
        self.__connected = False

    async def send_submission(self, submission: Submission, contributor_id: str | None = None) -> None:
        """ Sends a validated submission to the registry.

        Args:
            submission: The submission to send.
            contributor_id: Identifier of the contributing user, if known.

        Raises:
            TransportError: If the registry rejects the submission or cannot be reached.
        """
        self._check_connected()
        await self._send_submission(submission.to_wire(), contributor_id, submission.program_id)

    async def recv_discriminators(self, program_id: str) -> list[Discriminator]:
        """ Receives the discriminators known for a program.

        Raises:
            TransportError: If the registry fails or sends malformed records.
        """
        self._check_connected()
        records = await self._recv_discriminators(program_id)
        return self._parse(records, Discriminator.from_record)

    async def recv_instructions(self, discriminator_id: str) -> list[Instruction]:
        """ Receives the instructions associated with a discriminator.

        Raises:
            TransportError: If the registry fails or sends malformed records.
        """
        self._check_connected()
        records = await self._recv_instructions(discriminator_id)
        return self._parse(records, Instruction.from_record)

    async def recv_health(self) -> str:
        """ Receives the registry's health message. """
        self._check_connected()
        return await self._recv_health()

    def _check_connected(self):
        if not self.connected:
            raise ConnectionClosed()

    @staticmethod
    def _parse(records: t.Any, parser: t.Callable[[t.Any], R]) -> list[R]:
        if not isinstance(records, list):
            raise TransportError(f"Malformed registry response; expected an array, "
                                 f"got {type(records).__name__}")
        try:
            return [parser(record) for record in records]
        except WireFormatError as exc:
            raise TransportError(f"Malformed registry response; {exc}") from exc

    @abstractmethod
    async def _send_submission(self, body: dict[str, t.Any], contributor_id: str | None, program_id: str) -> None:
        """ This method must deliver the JSON body of a submission.

        Args:
            body: Wire form of the submission.
            contributor_id: Identifier of the contributing user, if known.
            program_id: The program the submission belongs to.

        Raises:
            TransportError: If delivery failed.
        """

    @abstractmethod
    async def _recv_discriminators(self, program_id: str) -> t.Any:
        """ This method must return the decoded JSON array of discriminator
        records for a program, or an empty list if there are none.
        """

    @abstractmethod
    async def _recv_instructions(self, discriminator_id: str) -> t.Any:
        """ This method must return the decoded JSON array of instruction
        records for a discriminator, or an empty list if there are none.
        """

    @abstractmethod
    async def _recv_health(self) -> str:
        """ This method must return the registry's health message. """
