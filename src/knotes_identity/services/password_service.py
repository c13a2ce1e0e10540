"""bcrypt hashing for local account passwords."""

from functools import lru_cache

import bcrypt

from knotes_identity.domain.user.value_objects import Password

# Modular crypt format: $2b$<cost>$<salt+digest>
_COST_FIELD = 2


@lru_cache(maxsize=None)
def _decoy_hash(rounds: int) -> str:
    digest = bcrypt.hashpw(b"knotes-decoy", bcrypt.gensalt(rounds=rounds))
    return digest.decode("ascii")


class PasswordHashingService:
    """Hash and check passwords with bcrypt at a fixed cost.

    Only ``Password`` objects are hashed, so the strength and length rules
    are enforced before any work is spent. Verification takes a raw string
    because login must not reveal which rule a bad guess broke.

    Examples
    --------
    >>> service = PasswordHashingService(rounds=4)
    >>> stored = service.hash(Password("correct horse"))
    >>> service.verify("correct horse", stored)
    True
    >>> service.needs_rehash(stored)
    False
    """

    def __init__(self, rounds: int = 12):
        """
        Parameters
        ----------
        rounds
            bcrypt cost factor, i.e. log2 of the key-expansion iterations
        """
        self._rounds = rounds

    def hash(self, password: Password) -> str:
        digest = bcrypt.hashpw(
            password.get_value().encode("utf-8"),
            bcrypt.gensalt(rounds=self._rounds),
        )
        return digest.decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True when ``password`` matches ``password_hash``.

        A malformed hash, or input bcrypt refuses, counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            return False

    def verify_decoy(self, password: str) -> bool:
        """Do the work of ``verify`` against a hash that belongs to no account.

        For logins that name no usable account; costs as much as a real
        check. Always False.
        """
        self.verify(password, _decoy_hash(self._rounds))
        return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Return True when the hash was made with another cost, or is unreadable."""
        fields = password_hash.split("$")
        if len(fields) <= _COST_FIELD or not fields[_COST_FIELD].isdigit():
            return True
        return int(fields[_COST_FIELD]) != self._rounds
