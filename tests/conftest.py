import pytest

from discdir import SubmissionForm
from tests.impl.registry import Registry, Transport


@pytest.fixture(scope="session")
def forms_maker():
    return lambda program_id='Prog111': [
        SubmissionForm(program_id, '5a11bd35ffaa0011', '04000000', 'transfer'),
        SubmissionForm(program_id, '0x0102030405060708'),
        SubmissionForm(program_id, 'AFAFAFAFAFAFAFAF', '0100000000000000'),
    ]


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture
def transport_maker(registry):
    def transport_maker(delay=0, error=None):
        return Transport(registry, delay, error)

    return transport_maker


@pytest.fixture(scope="session")
def discriminator_record_maker():
    def record_maker(data=(0x5a, 0x11, 0xbd, 0x35, 0xff, 0xaa, 0x00, 0x11), program_id='Prog111', instruction=True):
        discriminator_id = bytes(data).hex()
        return {
            'id': f'{program_id}_{discriminator_id}',
            'discriminator_id': discriminator_id,
            'discriminator_data': list(data),
            'program_id': program_id,
            'user_id': 'alice',
            'instruction': {
                'id': f'{program_id}_instruction',
                'instruction_id': 'transfer',
                'instruction_data': [4, 0, 0, 0],
            } if instruction else None,
        }

    return record_maker
