import typing as t

from discdir.models import Discriminator, Instruction, Submission

__all__ = ('Connection', 'Registry')


@t.runtime_checkable
class Connection(t.Protocol):
    """ A protocol defining a single connection to the remote registry.
    """

    def close(self):
        """ Forcibly closes the connection. """

    async def open_connection(self, *args: t.Any, **kwargs: t.Any) -> None:
        """ Establishes the connection.

        Args:
            args: Reserved positional arguments.
            kwargs: Reserved named arguments.
        """

    async def close_connection(self) -> None:
        """ Closes the connection. """

    async def send_submission(self, submission: Submission, contributor_id: str | None = None) -> None:
        """ Sends a validated submission to the registry.

        Raises:
            TransportError: If the registry rejects the submission or cannot be reached.
        """

    async def recv_discriminators(self, program_id: str) -> list[Discriminator]:
        """ Receives the discriminators known for a program; empty if none. """

    async def recv_instructions(self, discriminator_id: str) -> list[Instruction]:
        """ Receives the instructions associated with a discriminator; empty if none. """

    async def recv_health(self) -> str:
        """ Receives the registry's health message. """


@t.runtime_checkable
class Registry(t.Protocol):
    """ A protocol defining the operations the directory needs from the
    remote registry. Byte values passed in are already validated; values
    returned are taken as the registry sent them.
    """

    async def submit(self, submission: Submission, contributor_id: str | None = None) -> None:
        """ Submits a discriminator, with an optional instruction, for a program.

        Raises:
            TransportError: With the registry's reason if the submission failed.
        """

    async def fetch_by_program(self, program_id: str) -> list[Discriminator]:
        """ Fetches the discriminators registered for a program. """

    async def fetch_instructions_by_discriminator(self, discriminator_id: str) -> list[Instruction]:
        """ Fetches the instructions registered for a discriminator. """
