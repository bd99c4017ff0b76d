import re
import math
import logging
from typing import Any, Dict, List, Tuple
from pydantic import BaseModel, ConfigDict

from config import (
    NAME_COLUMN,
    EMAIL_COLUMN,
    PHONE_COLUMN,
    GENDER_COLUMN,
    MIN_PHONE_LENGTH,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
GENDER_CODES = ("M", "F")

NAME_ERROR = "Name is required and must be a valid string"
EMAIL_ERROR = "Email is invalid or missing"
PHONE_ERROR = "Phone number is invalid or missing"
GENDER_ERROR = "Gender must be either 'M' or 'F'"


class SheetRow(BaseModel):
    """
    One data row read from the first sheet.

    Attributes:
        row_index: 1-based position of the row in the source sheet
        values: Column name to cell value, in header order. Blank cells are None.
    """
    row_index: int
    values: Dict[str, Any]


class ValidationVerdict(BaseModel):
    """
    Validation outcome for a single row.

    Attributes:
        is_valid: True when every field rule passed
        errors: Messages for the failing fields, in field order
        row: The row values that were checked
        row_index: 1-based position of the row in the source sheet
    """
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: List[str]
    row: Dict[str, Any]
    row_index: int


class Summary(BaseModel):
    total: int
    valid_count: int
    invalid_count: int


def validate_name(name: Any) -> bool:
    return isinstance(name, str) and len(name.strip()) > 0


def validate_email(email: Any) -> bool:
    if email is None:
        return False
    return EMAIL_PATTERN.fullmatch(str(email)) is not None


def validate_phone(phone: Any) -> bool:
    """
    Check that a phone value is present, numeric and long enough.

    Numbers are accepted as-is; strings must parse as a plain decimal
    number. The length check applies to the value's string form.
    """
    if phone is None or isinstance(phone, bool):
        return False

    if isinstance(phone, (int, float)):
        if phone == 0 or not math.isfinite(phone):
            return False
    else:
        text = str(phone)
        if not NUMBER_PATTERN.fullmatch(text.strip()):
            return False

    return len(str(phone)) >= MIN_PHONE_LENGTH


def validate_gender(gender: Any) -> bool:
    if gender is None:
        return False
    return str(gender).upper() in GENDER_CODES


def validate_row(row: Dict[str, Any], row_index: int) -> ValidationVerdict:
    """
    Validate one row against the Name/Email/Phone/Gender schema.

    Every field is checked so the verdict lists all problems at once.
    A column missing from the sheet is treated as a blank cell.

    Args:
        row: Column name to cell value mapping
        row_index: 1-based sheet position of the row

    Returns:
        ValidationVerdict for the row
    """
    errors = []

    if not validate_name(row.get(NAME_COLUMN)):
        errors.append(NAME_ERROR)

    if not validate_email(row.get(EMAIL_COLUMN)):
        errors.append(EMAIL_ERROR)

    if not validate_phone(row.get(PHONE_COLUMN)):
        errors.append(PHONE_ERROR)

    if not validate_gender(row.get(GENDER_COLUMN)):
        errors.append(GENDER_ERROR)

    return ValidationVerdict(
        is_valid=not errors,
        errors=errors,
        row=row,
        row_index=row_index,
    )


def summarize(verdicts: List[ValidationVerdict]) -> Summary:
    valid_count = sum(1 for verdict in verdicts if verdict.is_valid)
    return Summary(
        total=len(verdicts),
        valid_count=valid_count,
        invalid_count=len(verdicts) - valid_count,
    )


def partition_rows(
    rows: List[SheetRow],
) -> Tuple[List[ValidationVerdict], List[ValidationVerdict], Summary]:
    """
    Validate every row and split the verdicts into valid and invalid lists.

    Both lists keep the order of the source rows.

    Args:
        rows: Rows in sheet order

    Returns:
        Tuple of (valid verdicts, invalid verdicts, summary)
    """
    verdicts = [validate_row(row.values, row.row_index) for row in rows]
    valid = [verdict for verdict in verdicts if verdict.is_valid]
    invalid = [verdict for verdict in verdicts if not verdict.is_valid]
    summary = summarize(verdicts)

    logger.debug(
        "Partitioned rows",
        extra={"total": summary.total, "valid": summary.valid_count, "invalid": summary.invalid_count},
    )
    return valid, invalid, summary
