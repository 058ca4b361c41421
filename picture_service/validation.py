from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from common.dates import CANONICAL_DATE
from picture_service.errors import ValidationError

ROVERS = ("curiosity", "opportunity", "spirit")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if self.valid == (self.reason is not None):
            raise ValueError("reason must be set iff the result is invalid")

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ValidationError(self.reason)


def validate(rover: Optional[str], date: Optional[str]) -> ValidationResult:
    """
    Check the `rover` and `date` query parameters; the first failing rule wins.

    Only the date's shape is checked (YYYY-MM-DD), so "2015-13-99" passes.
    """
    if not rover:
        return ValidationResult(False, "No Rover Provided")
    if rover.lower() not in ROVERS:
        return ValidationResult(
            False, f"Invalid Rover Provided. Valid Rovers are: {','.join(ROVERS)}. Provided: {rover}"
        )
    if not date:
        return ValidationResult(False, "No Date Provided")
    if not CANONICAL_DATE.fullmatch(date):
        return ValidationResult(
            False, f"Invalid Date Provided. Valid Dates must be in the form YYYY-MM-DD. Provided: {date}"
        )
    return ValidationResult(True)
