"""Tests for :mod:`gatehouse.passwords`."""

from unittest import TestCase

from hypothesis import given, settings
from hypothesis import strategies as st

from ..exceptions import HashingFailure
from ..passwords import CredentialHasher, HashedCredential, RawSecret

hasher = CredentialHasher(time_cost=1, memory_cost=8, parallelism=1)


class TestRedaction(TestCase):
    """Secrets and hashes never show up in debug output."""

    def test_raw_secret(self):
        """The plaintext is not in the repr or str."""
        secret = RawSecret('hunter22hunter22')
        self.assertNotIn('hunter22', repr(secret))
        self.assertNotIn('hunter22', str(secret))
        self.assertNotIn('hunter22', f'{[secret]}')
        self.assertEqual(secret.expose(), 'hunter22hunter22')

    def test_hashed_credential(self):
        """The encoded hash is not in the repr."""
        hashed = hasher.hash(RawSecret('hunter22hunter22'))
        self.assertNotIn(hashed.expose(), repr(hashed))
        self.assertTrue(hashed.expose().startswith('$argon2id$'))


class TestHashing(TestCase):
    """Tests for :class:`.CredentialHasher`."""

    @settings(max_examples=25, deadline=None)
    @given(st.text(min_size=1, max_size=64))
    def test_round_trip(self, plaintext):
        """A hash verifies against the secret it was made from."""
        secret = RawSecret(plaintext)
        hashed = hasher.hash(secret)
        self.assertTrue(hasher.verify(hashed, secret))
        self.assertFalse(hasher.verify(hashed, RawSecret(plaintext + 'x')))

    def test_salted(self):
        """Hashing the same secret twice gives different hashes."""
        secret = RawSecret('at-least-8-chars')
        first = hasher.hash(secret)
        second = hasher.hash(secret)
        self.assertNotEqual(first, second)
        self.assertTrue(hasher.verify(first, secret))
        self.assertTrue(hasher.verify(second, secret))

    def test_mismatch(self):
        """A wrong candidate is a plain ``False``, not an error."""
        hashed = hasher.hash(RawSecret('at-least-8-chars'))
        self.assertFalse(hasher.verify(hashed, RawSecret('wrong')))

    def test_malformed_hash(self):
        """A corrupt stored hash is reported as a hashing failure."""
        with self.assertRaises(HashingFailure):
            hasher.verify(HashedCredential('not-a-hash'),
                          RawSecret('at-least-8-chars'))

    def test_dummy_verify(self):
        """The dummy verification never succeeds."""
        self.assertFalse(hasher.dummy_verify(RawSecret('not-a-real-credential')))
        self.assertFalse(hasher.dummy_verify(RawSecret('anything')))
