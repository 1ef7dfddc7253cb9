"""
Input Validation for the roster document

Validates imported or posted roster data before it reaches the store or the
engine. Raises ValueError with clear messages for any shape violations.
Fields other than ROSTER_FIELDS are ignored.
The engine itself accepts any sequence of Participant records.
"""

import math
from decimal import Decimal, InvalidOperation

ROSTER_FIELDS = ("name", "spent", "alias", "enabled")


class RosterValidator:
    """Validates a roster document (array of participant records)."""

    def validate(self, data) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        if not isinstance(data, list):
            raise ValueError(
                f"Roster document must be an array of participants, got: {type(data).__name__}"
            )

        for index, record in enumerate(data):
            self.validate_record(record, index)

    def validate_record(self, record, index: int = 0) -> None:
        """Validate the known fields of a single participant record."""
        if not isinstance(record, dict):
            raise ValueError(f"Participant {index} must be an object, got: {type(record).__name__}")

        for text_field in ("name", "alias"):
            if text_field in record and not isinstance(record[text_field], str):
                raise ValueError(f"Participant {index} {text_field} must be a string")

        if "enabled" in record and not isinstance(record["enabled"], bool):
            raise ValueError(f"Participant {index} enabled must be true or false")

        if "spent" in record:
            self.validate_spent(record["spent"], index)

    def validate_spent(self, value, index: int = 0) -> None:
        """spent must be a finite number (or numeric string)."""
        if isinstance(value, bool):
            raise ValueError(f"Participant {index} spent must be a number, got: {value}")

        if isinstance(value, (int, float, Decimal)):
            number = value
        elif isinstance(value, str):
            try:
                number = Decimal(value.strip())
            except InvalidOperation:
                raise ValueError(f"Participant {index} spent must be a number, got: {value!r}")
        else:
            raise ValueError(f"Participant {index} spent must be a number, got: {value!r}")

        if isinstance(number, Decimal):
            finite = number.is_finite()
        else:
            finite = math.isfinite(number)
        if not finite:
            raise ValueError(f"Participant {index} spent must be finite, got: {value}")
