"""Password value object for plaintext password input."""

from __future__ import annotations

from knotes_identity.domain.user.exceptions import WeakPasswordError

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class Password:
    """
    A validated plaintext password (never the hash).

    Prevents accidental exposure through ``str``/``repr``, logging and
    error messages. The raw value is only reachable via ``get_value()``.
    There is deliberately no serialization support.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        if not isinstance(value, str):
            msg = "Password must be a string"
            raise WeakPasswordError(msg)

        if len(value) < MIN_PASSWORD_LENGTH:
            msg = (
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters, "
                f"got {len(value)}"
            )
            raise WeakPasswordError(msg)

        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            msg = f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes"
            raise WeakPasswordError(msg)

        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Password is immutable"
        raise AttributeError(msg)

    def get_value(self) -> str:
        """Return the plaintext. The explicit name marks sensitive access."""
        return self._value

    def __str__(self) -> str:
        return "***"

    def __repr__(self) -> str:
        return "Password(***)"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Password):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __len__(self) -> int:
        return len(self._value)
