import asyncio

import pytest

from discdir import Directory, SubmissionForm, normalize_discriminator_id
from discdir.encoding import InvalidHexCharset, InvalidLength, decode, encode
from discdir.transport import TransportError


async def test_submit_and_query(registry, transport_maker, forms_maker):
    directory = Directory(transport_maker(), contributor_id='alice')

    for form in forms_maker():
        result = await directory.submit(form)
        assert result.ok, result
        assert form == SubmissionForm()
    assert [contributor_id for _, contributor_id in registry.submissions] == ['alice'] * 3

    result = await directory.query_program(' Prog111 ')
    assert result.ok
    assert directory.discriminators == result.items
    assert [view.hex for view in result.items] == ['5a11bd35ffaa0011', '0102030405060708', 'afafafafafafafaf']
    assert encode(decode("5a11bd35ffaa0011")) == result.items[0].hex

    first = result.items[0]
    assert first.data.spaced == "5a 11 bd 35 ff aa 00 11"
    assert first.data.interpretation == "Likely a discriminator (8 bytes)"
    assert first.instruction.label == 'transfer'
    assert first.instruction.data.interpretation == "Possible command/variant index: 4"
    assert result.items[1].instruction.data.spaced == "(No data)"

    result = await directory.query_instructions('0x5A11BD35FFAA0011')
    assert result.ok
    assert [view.data.hex for view in result.items] == ['04000000']
    assert directory.instructions == result.items

    result = await directory.query_program('Unknown')
    assert result.ok and result.items == ()
    assert directory.discriminators == ()


@pytest.mark.parametrize("discriminator_data", ['5a11bd35ffaa00', '5a11bd35ffaa001122'])
async def test_submit_wrong_length(registry, transport_maker, discriminator_data):
    directory = Directory(transport_maker())
    form = SubmissionForm('Prog111', discriminator_data)
    result = await directory.submit(form)

    assert not result.ok
    assert result.submission is None
    assert result.messages == {
        'discriminator_data': "Discriminator data must be exactly 8 bytes (16 hex characters)"
    }
    assert result.errors[0].kind is InvalidLength
    assert registry.submissions == []
    assert form.discriminator_data == discriminator_data


@pytest.mark.parametrize("form, field, message, kind", [
    (SubmissionForm('', '5a11bd35ffaa0011'), 'program_id', "Program ID is required", None),
    (SubmissionForm('  ', 'zz'), 'program_id', "Program ID is required", None),
    (SubmissionForm('Prog111', ' '), 'discriminator_data', "Discriminator data is required", None),
    (SubmissionForm('Prog111', 'zz'), 'discriminator_data',
     "Discriminator data must be a valid hexadecimal string", InvalidHexCharset),
    (SubmissionForm('Prog111', 'zz', 'xx'), 'discriminator_data',
     "Discriminator data must be a valid hexadecimal string", InvalidHexCharset),
    (SubmissionForm('Prog111', '5a11bd35ffaa0011', '04 00'), 'instruction_data',
     "Instruction data must be a valid hexadecimal string", InvalidHexCharset),
    (SubmissionForm('Prog111', '5a11', 'xx'), 'instruction_data',
     "Instruction data must be a valid hexadecimal string", InvalidHexCharset),
])
async def test_submit_invalid_input(registry, transport_maker, form, field, message, kind):
    directory = Directory(transport_maker())
    result = await directory.submit(form)

    assert not result.ok
    assert result.messages == {field: message}
    assert result.errors[0].kind is kind
    assert form.validate() == list(result.errors)
    assert registry.submissions == []


async def test_submit_optional_fields(registry, transport_maker):
    directory = Directory(transport_maker(), contributor_id='alice')
    result = await directory.submit(SubmissionForm('Prog111', '0x5A11BD35FFAA0011', ' ', ' '))

    assert result.ok
    assert result.submission.instruction_data is None
    assert result.submission.instruction_id is None
    body, contributor_id = registry.submissions[0]
    assert body['discriminator_data'] == [0x5a, 0x11, 0xbd, 0x35, 0xff, 0xaa, 0x00, 0x11]
    assert contributor_id == 'alice'


async def test_submit_without_contributor(registry, transport_maker, forms_maker):
    directory = Directory(transport_maker())
    form = forms_maker()[0]
    result = await directory.submit(form)

    assert not result.ok
    assert result.reason == "Missing user_id header"
    assert form.discriminator_data == '5a11bd35ffaa0011'
    assert registry.submissions == []

    assert (await directory.submit(form, 'bob')).ok
    assert registry.submissions[0][1] == 'bob'


async def test_transport_failure(caplog, transport_maker, forms_maker):
    error = TransportError("Database error: disk full", 500)
    transport = transport_maker()
    directory = Directory(transport, contributor_id='alice')

    assert (await directory.submit(forms_maker()[0])).ok
    assert (await directory.query_program('Prog111')).ok
    discriminators = directory.discriminators

    transport.error = error
    form = forms_maker()[1]
    result = await directory.submit(form)
    assert not result.ok
    assert result.reason == "Database error: disk full"
    assert form.discriminator_data == '0x0102030405060708'
    assert "submission failed: Database error: disk full" in caplog.text

    result = await directory.query_program('Prog111')
    assert not result.ok
    assert result.reason == "Database error: disk full"
    assert result.items == ()
    assert directory.discriminators is discriminators

    result = await directory.query_instructions('5a11bd35ffaa0011')
    assert result.reason == "Database error: disk full"
    assert directory.instructions == ()


async def test_required_query_ids(transport_maker):
    directory = Directory(transport_maker())
    assert (await directory.query_program('  ')).reason == "Program ID is required"
    assert (await directory.query_instructions('')).reason == "Discriminator ID is required"


async def test_stale_query(transport_maker, forms_maker):
    transport = transport_maker()
    directory = Directory(transport, contributor_id='alice')
    for form in forms_maker('Prog111'):
        await directory.submit(form)
    await directory.submit(forms_maker('Prog222')[0])

    transport.delay = 0.2
    slow = asyncio.create_task(directory.query_program('Prog111'))
    await asyncio.sleep(0.05)
    assert directory.pending
    transport.delay = 0
    fast = await directory.query_program('Prog222')

    assert fast.ok
    assert [view.discriminator.program_id for view in directory.discriminators] == ['Prog222']
    result = await slow
    assert result.stale and not result.ok
    assert result.items == ()
    assert [view.discriminator.program_id for view in directory.discriminators] == ['Prog222']
    assert not directory.pending


async def test_stale_failure(transport_maker, forms_maker):
    transport = transport_maker(delay=0.2, error=TransportError("Timeout"))
    directory = Directory(transport, contributor_id='alice')

    slow = asyncio.create_task(directory.submit(forms_maker()[0]))
    await asyncio.sleep(0.05)
    transport.delay, transport.error = 0, None
    assert (await directory.submit(forms_maker()[1])).ok

    result = await slow
    assert result.stale
    assert result.reason is None


async def test_pending(transport_maker):
    transport = transport_maker(delay=0.1)
    directory = Directory(transport)
    assert not directory.pending

    task = asyncio.create_task(directory.query_instructions('5a11bd35ffaa0011'))
    await asyncio.sleep(0.02)
    assert directory.pending
    assert (await task).ok
    assert not directory.pending


def test_normalize_discriminator_id():
    assert normalize_discriminator_id("0x5A11BD35FFAA0011") == '5a11bd35ffaa0011'
    assert normalize_discriminator_id(" 5a11bd35ffaa0011 ") == '5a11bd35ffaa0011'
    assert normalize_discriminator_id("Prog111_5a11") == 'Prog111_5a11'
    assert normalize_discriminator_id("") == ''


def test_directory_requires_registry():
    with pytest.raises(TypeError, match="Expected a registry transport, got object"):
        Directory(object())
