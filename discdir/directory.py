"""
The directory is where user input meets the registry. Hex text typed by a
person is checked and decoded here, and only validated byte sequences are
handed to the transport; everything received back is re-encoded and
re-interpreted before it is shown. Input errors never leave this module as
exceptions: they come back as field messages in a result.
"""
import logging
import typing as t
from dataclasses import dataclass

from discdir.encoding import (DataView, InvalidHexCharset, InvalidLength, decode, describe, encode,
                              validate_fixed_length, validate_hex_charset)
from discdir.encoding.errors import EncodingError
from discdir.errors import InvalidForm, Superseded
from discdir.models import DISCRIMINATOR_SIZE, Discriminator, Instruction, Submission
from discdir.pending import Latest
from discdir.transport import Registry, TransportError

__all__ = ('Directory', 'DiscriminatorView', 'FieldError', 'InstructionView', 'QueryResult',
           'SubmissionForm', 'SubmitResult', 'normalize_discriminator_id')

logger = logging.getLogger(__name__)

T = t.TypeVar('T')


@dataclass(frozen=True)
class FieldError:
    """ A validation message attached to one input field. """
    field: str
    message: str
    kind: type[EncodingError] | None = None


@dataclass
class SubmissionForm:
    """ Raw user input of a discriminator submission.

    Attributes:
        program_id: Program the discriminator belongs to.
        discriminator_data: Discriminator bytes as hex text.
        instruction_data: Optional instruction bytes as hex text.
        instruction_id: Optional instruction name.
    """
    program_id: str = ''
    discriminator_data: str = ''
    instruction_data: str = ''
    instruction_id: str = ''

    def validate(self) -> list[FieldError]:
        """ Checks the input and returns the first problem found, if any. """
        try:
            self.submission()
        except InvalidForm as exc:
            return list(exc.errors)
        return []

    def submission(self) -> Submission:
        """ Builds a submission from the input.

        Raises:
            InvalidForm: If the input is not acceptable.
        """
        program_id = self.program_id.strip()
        discriminator_text = self.discriminator_data.strip()
        instruction_text = self.instruction_data.strip()

        if not program_id:
            raise InvalidForm([FieldError('program_id', "Program ID is required")])
        if not discriminator_text:
            raise InvalidForm([FieldError('discriminator_data', "Discriminator data is required")])
        if not validate_hex_charset(discriminator_text):
            raise InvalidForm([FieldError('discriminator_data',
                                          "Discriminator data must be a valid hexadecimal string",
                                          InvalidHexCharset)])
        if instruction_text and not validate_hex_charset(instruction_text):
            raise InvalidForm([FieldError('instruction_data',
                                          "Instruction data must be a valid hexadecimal string",
                                          InvalidHexCharset)])
        discriminator = decode(discriminator_text)
        if not validate_fixed_length(discriminator, DISCRIMINATOR_SIZE):
            raise InvalidForm([FieldError('discriminator_data',
                                          f"Discriminator data must be exactly {DISCRIMINATOR_SIZE} bytes "
                                          f"({DISCRIMINATOR_SIZE * 2} hex characters)",
                                          InvalidLength)])
        return Submission(
            program_id=program_id,
            discriminator_data=discriminator,
            instruction_data=decode(instruction_text) if instruction_text else None,
            instruction_id=self.instruction_id.strip() or None,
        )

    def reset(self):
        self.program_id = self.discriminator_data = self.instruction_data = self.instruction_id = ''


@dataclass(frozen=True)
class InstructionView:
    """ An instruction ready for display. """
    instruction: Instruction
    data: DataView

    @classmethod
    def of(cls, instruction: Instruction) -> 'InstructionView':
        return cls(instruction, describe(instruction.instruction_data))

    @property
    def label(self) -> str:
        return self.instruction.instruction_id


@dataclass(frozen=True)
class DiscriminatorView:
    """ A discriminator ready for display, with its instruction if any. """
    discriminator: Discriminator
    data: DataView
    instruction: InstructionView | None

    @classmethod
    def of(cls, discriminator: Discriminator) -> 'DiscriminatorView':
        instruction = discriminator.instruction
        return cls(discriminator, describe(discriminator.discriminator_data),
                   InstructionView.of(instruction) if instruction is not None else None)

    @property
    def hex(self) -> str:
        return self.data.hex


@dataclass(frozen=True)
class SubmitResult:
    """ Outcome of a submission.

    Attributes:
        ok: True if the registry accepted the submission.
        submission: What was sent, if anything was.
        errors: Field messages that blocked the submission locally.
        reason: The transport's failure message, as reported.
        stale: True if a newer submission superseded this one.
    """
    ok: bool
    submission: Submission | None = None
    errors: tuple[FieldError, ...] = ()
    reason: str | None = None
    stale: bool = False

    @property
    def messages(self) -> dict[str, str]:
        return {error.field: error.message for error in self.errors}


@dataclass(frozen=True)
class QueryResult(t.Generic[T]):
    """ Outcome of a query; `items` is empty unless `ok`. """
    items: tuple[T, ...] = ()
    reason: str | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.reason is None and not self.stale


class Directory:
    """ Discriminator directory bound to a registry.

    Each of the three forms (submission, program query, discriminator query)
    has at most one request that counts; results of superseded requests are
    reported as stale and dropped. The last successful query results are
    kept in :attr:`discriminators` and :attr:`instructions` and are only
    replaced as a whole.

    Args:
        registry: The remote registry, e.g. :class:`discdir.http.Transport`.
        contributor_id: Default contributor recorded with submissions.

    Raises:
        TypeError: If `registry` does not implement the registry protocol.
    """

    def __init__(self, registry: Registry, contributor_id: str | None = None):
        if not isinstance(registry, Registry):
            raise TypeError(f"Expected a registry transport, got {type(registry).__name__}")
        self._registry = registry
        self._contributor_id = contributor_id
        self._submitting = Latest[None]()
        self._querying_program = Latest[list[Discriminator]]()
        self._querying_instructions = Latest[list[Instruction]]()
        self.discriminators: tuple[DiscriminatorView, ...] = ()
        self.instructions: tuple[InstructionView, ...] = ()

    @property
    def pending(self) -> bool:
        """ True while any form has a request in flight. """
        return any(latest.pending for latest in
                   (self._submitting, self._querying_program, self._querying_instructions))

    async def submit(self, form: SubmissionForm, contributor_id: str | None = None) -> SubmitResult:
        """ Validates a submission form and, if it is acceptable, submits it.
        The form is cleared after the registry accepts it.

        Args:
            form: User input.
            contributor_id: Contributor to record; the directory's default otherwise.
        """
        try:
            submission = form.submission()
        except InvalidForm as exc:
            logger.debug(f"Submission blocked: {exc}")
            return SubmitResult(False, errors=exc.errors)

        try:
            await self._submitting.run(
                self._registry.submit(submission, contributor_id or self._contributor_id))
        except Superseded:
            logger.debug(f"Program# {submission.program_id}; superseded submission dropped")
            return SubmitResult(False, submission, stale=True)
        except TransportError as exc:
            logger.warning(f"Program# {submission.program_id}; submission failed: {exc.reason}", exc_info=exc)
            return SubmitResult(False, submission, reason=exc.reason)

        form.reset()
        return SubmitResult(True, submission)

    async def query_program(self, program_id: str) -> QueryResult[DiscriminatorView]:
        """ Queries the discriminators registered for a program.

        Args:
            program_id: The program to query.
        """
        program_id = program_id.strip()
        if not program_id:
            return QueryResult(reason="Program ID is required")
        try:
            discriminators = await self._querying_program.run(self._registry.fetch_by_program(program_id))
        except Superseded:
            logger.debug(f"Program# {program_id}; superseded query dropped")
            return QueryResult(stale=True)
        except TransportError as exc:
            logger.warning(f"Program# {program_id}; query failed: {exc.reason}", exc_info=exc)
            return QueryResult(reason=exc.reason)

        self.discriminators = tuple(DiscriminatorView.of(discriminator) for discriminator in discriminators)
        return QueryResult(self.discriminators)

    async def query_instructions(self, discriminator_id: str) -> QueryResult[InstructionView]:
        """ Queries the instructions registered for a discriminator.

        Args:
            discriminator_id: Registry identifier of the discriminator. Hex text,
                with or without ``0x`` and in any case, is normalised first.
        """
        discriminator_id = normalize_discriminator_id(discriminator_id)
        if not discriminator_id:
            return QueryResult(reason="Discriminator ID is required")
        try:
            instructions = await self._querying_instructions.run(
                self._registry.fetch_instructions_by_discriminator(discriminator_id))
        except Superseded:
            logger.debug(f"Discriminator# {discriminator_id}; superseded query dropped")
            return QueryResult(stale=True)
        except TransportError as exc:
            logger.warning(f"Discriminator# {discriminator_id}; query failed: {exc.reason}", exc_info=exc)
            return QueryResult(reason=exc.reason)

        self.instructions = tuple(InstructionView.of(instruction) for instruction in instructions)
        return QueryResult(self.instructions)


def normalize_discriminator_id(text: str) -> str:
    """ Returns the registry form of a discriminator identifier: hex text is
    re-encoded in lower case without prefix, anything else is kept as typed. """
    text = text.strip()
    if text and validate_hex_charset(text):
        return encode(decode(text))
    return text
