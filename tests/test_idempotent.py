import pytest

from resendex.emails import CreateEmailOptions
from resendex.idempotent import MAX_KEY_LENGTH, Idempotent, as_batch, with_idempotency_key


def test_no_key_by_default():
    wrapped = Idempotent({'subject': 'Hi'})
    assert wrapped.key is None


def test_with_key_returns_copy():
    wrapped = Idempotent('payload')
    keyed = wrapped.with_key('k-1')

    assert keyed.key == 'k-1'
    assert keyed.payload == 'payload'
    assert wrapped.key is None


@pytest.mark.parametrize('key', ['', 'x' * (MAX_KEY_LENGTH + 1)])
def test_invalid_keys(key):
    with pytest.raises(ValueError):
        Idempotent('payload', key)
    with pytest.raises(ValueError):
        with_idempotency_key(['payload'], key)


def test_key_length_edge():
    assert Idempotent('payload', 'x' * MAX_KEY_LENGTH).key == 'x' * MAX_KEY_LENGTH


def test_of_passes_wrapped_values_through():
    keyed = Idempotent('payload', 'k')
    assert Idempotent.of(keyed) is keyed
    assert Idempotent.of('payload') == Idempotent('payload')


def test_batch_shares_one_key():
    """Test that a whole sequence carries exactly one key."""
    batch = with_idempotency_key((n for n in range(1000)), 'batch-7')

    assert batch.key == 'batch-7'
    assert batch.payload == list(range(1000))


def test_as_batch_materializes_iterables():
    batch = as_batch(iter(['a', 'b']))
    assert batch == Idempotent(['a', 'b'])


def test_as_batch_keeps_the_batch_key():
    batch = as_batch(with_idempotency_key(['a'], 'k'))
    assert batch.key == 'k'
    assert batch.payload == ['a']


def test_as_batch_rejects_keyed_elements():
    with pytest.raises(ValueError):
        as_batch([Idempotent('a', 'k1'), Idempotent('b', 'k2')])


@pytest.mark.parametrize('payload', [
    CreateEmailOptions(from_='a@x.dev', to='b@x.dev', subject='Hi'),
    {'from': 'a@x.dev', 'to': ['b@x.dev'], 'subject': 'Hi'},
    'a@x.dev',
    b'a@x.dev',
])
def test_single_payload_is_not_a_batch(payload):
    with pytest.raises(ValueError):
        as_batch(payload)
    with pytest.raises(ValueError):
        as_batch(Idempotent(payload, 'k1'))
    with pytest.raises(ValueError):
        with_idempotency_key(payload, 'k1')
