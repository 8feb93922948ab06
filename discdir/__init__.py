"""
Client for a directory of Solana program discriminators and the instruction
byte layouts they select.

Quick start::

    from discdir import Directory, SubmissionForm
    from discdir.http import Transport

    directory = Directory(Transport('http://localhost:8080'), contributor_id='alice')
    result = await directory.submit(SubmissionForm('Prog111', '5a11bd35ffaa0011'))
    found = await directory.query_program('Prog111')
"""
from .directory import (Directory, DiscriminatorView, FieldError, InstructionView, QueryResult,
                        SubmissionForm, SubmitResult, normalize_discriminator_id)
from .encoding import ByteSequence, DataView, classify, decode, describe, encode
from .models import Discriminator, Instruction, Submission, split_instruction_data

__all__ = ('ByteSequence', 'DataView', 'Directory', 'Discriminator', 'DiscriminatorView', 'FieldError',
           'Instruction', 'InstructionView', 'QueryResult', 'Submission', 'SubmissionForm', 'SubmitResult',
           'classify', 'decode', 'describe', 'encode', 'normalize_discriminator_id', 'split_instruction_data')
