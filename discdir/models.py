"""
Records mirrored from the remote registry, and the submission sent to it.
Byte fields always hold :class:`~discdir.encoding.ByteSequence` values; on the
wire they travel as JSON arrays of integers.
"""
import typing as t
from dataclasses import dataclass

from discdir.encoding import ByteSequence, decode
from discdir.encoding.errors import InvalidHexCharset, WireFormatError
from discdir.encoding.interpret import DISCRIMINATOR_SIZE

__all__ = ('DISCRIMINATOR_SIZE', 'Discriminator', 'Instruction', 'Submission', 'split_instruction_data')


def _field(record: dict[str, t.Any], name: str, default: t.Any = ...) -> t.Any:
    if name in record and record[name] is not None:
        return record[name]
    if default is ...:
        raise WireFormatError(f"Missing field `{name}`")
    return default


def split_instruction_data(raw: bytes) -> tuple[ByteSequence, ByteSequence] | None:
    """ Splits raw on-chain instruction data into its discriminator and the
    remaining instruction payload.

    Returns:
        A tuple ``(discriminator, payload)``, or None if `raw` is shorter
        than a discriminator.
    """
    if len(raw) < DISCRIMINATOR_SIZE:
        return None
    return ByteSequence(raw[:DISCRIMINATOR_SIZE]), ByteSequence(raw[DISCRIMINATOR_SIZE:])


@dataclass(frozen=True)
class Instruction:
    """ An instruction byte layout known to the registry. """
    id: str
    instruction_id: str
    instruction_data: ByteSequence

    @classmethod
    def from_record(cls, record: dict[str, t.Any] | str) -> 'Instruction':
        """ Builds an instruction from a registry record.

        Older registries answer with the bare hex text of the instruction
        data instead of a record; that form is accepted too.

        Raises:
            WireFormatError: If the record is malformed.
        """
        if isinstance(record, str):
            try:
                return cls('', '', decode(record))
            except InvalidHexCharset as exc:
                raise WireFormatError(f"Cannot decode instruction data; {exc}") from exc
        if not isinstance(record, dict):
            raise WireFormatError(f"Instruction record must be an object, not {type(record).__name__}")
        return cls(
            id=str(_field(record, 'id', '')),
            instruction_id=str(_field(record, 'instruction_id', '')),
            instruction_data=ByteSequence.from_wire(_field(record, 'instruction_data', [])),
        )

    def to_record(self) -> dict[str, t.Any]:
        return {
            'id': self.id,
            'instruction_id': self.instruction_id,
            'instruction_data': self.instruction_data.to_wire(),
        }


@dataclass(frozen=True)
class Discriminator:
    """ A discriminator registered for a program.

    The registry may hold legacy entries whose data is not 8 bytes long;
    such records are accepted as they are.
    """
    id: str
    discriminator_id: str
    discriminator_data: ByteSequence
    program_id: str
    contributor_id: str
    instruction: Instruction | None = None

    @classmethod
    def from_record(cls, record: dict[str, t.Any]) -> 'Discriminator':
        """ Builds a discriminator from a registry record.

        Raises:
            WireFormatError: If the record is malformed.
        """
        if not isinstance(record, dict):
            raise WireFormatError(f"Discriminator record must be an object, not {type(record).__name__}")
        data = ByteSequence.from_wire(_field(record, 'discriminator_data'))
        instruction = record.get('instruction')
        return cls(
            id=str(_field(record, 'id', '')),
            discriminator_id=str(_field(record, 'discriminator_id', data.hex_text())),
            discriminator_data=data,
            program_id=str(_field(record, 'program_id', '')),
            contributor_id=str(_field(record, 'user_id', '')),
            instruction=Instruction.from_record(instruction) if instruction is not None else None,
        )

    def to_record(self) -> dict[str, t.Any]:
        return {
            'id': self.id,
            'discriminator_id': self.discriminator_id,
            'discriminator_data': self.discriminator_data.to_wire(),
            'program_id': self.program_id,
            'user_id': self.contributor_id,
            'instruction': self.instruction.to_record() if self.instruction is not None else None,
        }


@dataclass(frozen=True)
class Submission:
    """ A validated discriminator submission, ready for the transport.

    Instances are built by :meth:`discdir.directory.SubmissionForm.submission`
    after all input checks have passed.
    """
    program_id: str
    discriminator_data: ByteSequence
    instruction_data: ByteSequence | None = None
    instruction_id: str | None = None

    def to_wire(self) -> dict[str, t.Any]:
        """ Returns the JSON body of an upload request. """
        return {
            'program_id': self.program_id,
            'discriminator_data': self.discriminator_data.to_wire(),
            'instruction_data': self.instruction_data.to_wire() if self.instruction_data is not None else None,
            'instruction_id': self.instruction_id,
        }
