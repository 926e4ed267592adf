"""Field validation helpers shared by use cases

Validators collect every violated field instead of stopping at the first one.
"""

import re
from typing import Dict, List
from pydantic import EmailStr, TypeAdapter, ValidationError
from libs.result import Error
from src.domain.errors import ErrorCode

CURRENCY_PATTERN = re.compile(r"^[A-Za-z]{3}$")
CARD_NUMBER_PATTERN = re.compile(r"[0-9]{13,19}")
CVV_PATTERN = re.compile(r"[0-9]{3,4}")

_email_adapter = TypeAdapter(EmailStr)


def is_valid_email(value: str) -> bool:
    """Syntax check through pydantic's EmailStr (email-validator, no DNS lookup)"""
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


class FieldIssues:
    """Accumulates {field, message} pairs"""

    def __init__(self):
        self._issues: List[Dict[str, str]] = []

    def add(self, field: str, message: str) -> None:
        self._issues.append({"field": field, "message": message})

    def __bool__(self) -> bool:
        return bool(self._issues)

    def fields(self) -> List[str]:
        return [issue["field"] for issue in self._issues]

    def to_error(self, message: str = "Validation failed") -> Error:
        return Error(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            reason=", ".join(self.fields()),
            details=list(self._issues),
        )
