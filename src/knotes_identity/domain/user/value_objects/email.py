"""Email value object.

Provides validated, normalized email addresses for user identification.
"""

from dataclasses import dataclass

from knotes_identity.domain.user.exceptions import InvalidEmailError


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address.

    The value is trimmed and lower-cased. It must contain exactly one ``@``
    with non-empty local and domain parts, and the domain needs a dot.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            msg = "Email must be a string"
            raise InvalidEmailError(msg)

        normalized = self.value.strip().lower()

        parts = normalized.split("@")
        if len(parts) != 2 or not parts[0] or not parts[1]:  # noqa: PLR2004
            msg = f"Invalid email format: {self.value}"
            raise InvalidEmailError(msg)

        if "." not in parts[1]:
            msg = f"Invalid email format: {self.value}"
            raise InvalidEmailError(msg)

        # Replace value with normalized version (frozen dataclass workaround)
        object.__setattr__(self, "value", normalized)

    @staticmethod
    def normalize(raw: str) -> str:
        """Normalize a raw string the way construction does, without validating.

        Used for lookups, where an unparseable address simply matches nothing.
        """
        return raw.strip().lower()

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
