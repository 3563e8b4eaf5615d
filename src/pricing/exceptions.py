"""Error taxonomy for pricing calculations.

Validation errors carry field-keyed messages like every protean
``ValidationError``, so the API layer can render them uniformly as HTTP 400.
Carrier failures never leave the shipping resolver.
"""

from protean.exceptions import ValidationError


def flatten_messages(messages) -> str:
    """Render field-keyed validation messages as one human-readable line."""
    if not isinstance(messages, dict):
        return str(messages)

    parts = []
    for field, field_messages in messages.items():
        if isinstance(field_messages, list | tuple):
            field_messages = ", ".join(str(message) for message in field_messages)
        parts.append(f"{field}: {field_messages}")
    return "; ".join(parts)


class InvalidInputError(ValidationError):
    """A required field is missing or malformed."""


class InvalidAddressError(InvalidInputError):
    """Destination address is incomplete or outside the served countries."""


class InvalidAmountError(InvalidInputError):
    """A monetary input is negative."""


class UpstreamServiceError(Exception):
    """A carrier rate API failed, timed out or is not configured."""

    def __init__(self, carrier: str, reason: str) -> None:
        super().__init__(f"{carrier}: {reason}")
        self.carrier = carrier
        self.reason = reason


class InternalError(Exception):
    """Unexpected failure; reported to callers with a generic message."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Unexpected failure during {operation}")
        self.operation = operation
