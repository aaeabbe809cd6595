"""
Hashing and verification of password credentials.

Secrets are hashed with Argon2id, which is salted per hash and memory-hard.
The plaintext only ever lives inside a :class:`RawSecret`, which refuses to
print itself.
"""

import logging
from typing import Optional

from argon2 import PasswordHasher, Type
from argon2.exceptions import HashingError, InvalidHashError, \
    VerificationError, VerifyMismatchError

from .exceptions import HashingFailure

logger = logging.getLogger(__name__)


class RawSecret(object):
    """A plaintext secret as entered by a principal. Danger!"""

    __slots__ = ('_value',)

    def __init__(self, value: str) -> None:
        self._value = value

    def expose(self) -> str:
        """Get the plaintext."""
        return self._value

    def __repr__(self) -> str:
        return 'RawSecret(***)'

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RawSecret) and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)


class HashedCredential(object):
    """An encoded Argon2 hash, as stored alongside the principal."""

    __slots__ = ('_value',)

    def __init__(self, value: str) -> None:
        self._value = value

    def expose(self) -> str:
        """Get the encoded hash."""
        return self._value

    def __repr__(self) -> str:
        return 'HashedCredential(***)'

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HashedCredential) \
            and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)


class CredentialHasher(object):
    """
    One-way hashing of secrets.

    The defaults are those of :class:`argon2.PasswordHasher`. Lower them only
    for tests.
    """

    def __init__(self, time_cost: Optional[int] = None,
                 memory_cost: Optional[int] = None,
                 parallelism: Optional[int] = None) -> None:
        params = {}
        if time_cost is not None:
            params['time_cost'] = time_cost
        if memory_cost is not None:
            params['memory_cost'] = memory_cost
        if parallelism is not None:
            params['parallelism'] = parallelism
        self._hasher = PasswordHasher(type=Type.ID, **params)
        self._dummy: Optional[HashedCredential] = None

    def hash(self, secret: RawSecret) -> HashedCredential:
        """
        Generate a salted hash of ``secret``.

        Two calls with the same secret yield different hashes.

        Raises
        ------
        :class:`.HashingFailure`

        """
        try:
            return HashedCredential(self._hasher.hash(secret.expose()))
        except HashingError as e:
            logger.error('Failed to hash secret: %s', e)
            raise HashingFailure('Could not hash credential') from e

    def verify(self, hashed: HashedCredential, candidate: RawSecret) -> bool:
        """
        Check ``candidate`` against a stored hash.

        Returns
        -------
        bool
            ``False`` if the candidate does not match.

        Raises
        ------
        :class:`.HashingFailure`
            Raised only if the stored hash is malformed.

        """
        try:
            return bool(self._hasher.verify(hashed.expose(),
                                            candidate.expose()))
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as e:
            logger.error('Stored credential could not be verified: %s', e)
            raise HashingFailure('Could not verify credential') from e

    def dummy_verify(self, candidate: RawSecret) -> bool:
        """
        Run a verification that cannot succeed.

        Used when there is no stored hash to check against, so that the
        caller spends about as long as it would on a real mismatch.
        """
        if self._dummy is None:
            self._dummy = self.hash(RawSecret('not-a-real-credential'))
        self.verify(self._dummy, candidate)
        return False
