"""KYC document field validation.

Pure functions: no I/O, no side effects. ``validate_kyc_fields`` either
returns normalized fields or raises ``ValidationError`` naming the first
field that failed.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from app.core.constants import KycDocumentType, ValidationErrorCode
from app.utils.errors import ValidationError

# Checked against the number exactly as submitted
RAW_DOCUMENT_NUMBER = re.compile(r"[A-Za-z0-9]{5,50}")

DOCUMENT_NUMBER_PATTERNS = {
    KycDocumentType.NIN: re.compile(r"[0-9]{11}"),
    KycDocumentType.PASSPORT: re.compile(r"[A-Z][0-9]{8}"),
    KycDocumentType.DRIVERS_LICENSE: re.compile(r"[A-Z0-9]{10,12}"),
    KycDocumentType.VOTERS_CARD: re.compile(r"[A-Z0-9]{19}"),
    KycDocumentType.NATIONAL_ID: re.compile(r"[A-Z0-9]{8,15}"),
}

# Letters (any script), spaces, hyphens, apostrophes, periods
FULL_NAME = re.compile(r"(?:[^\W\d_]|[ \-'.])+")
FULL_NAME_MIN, FULL_NAME_MAX = 2, 100

MAX_AGE_YEARS = 150
MIN_AGE_YEARS = 1


@dataclass(frozen=True)
class ValidatedKycFields:
    document_type: KycDocumentType
    document_number: str
    full_name: str
    date_of_birth: date


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year - years, day=28)


def validate_document_type(value) -> KycDocumentType:
    try:
        return KycDocumentType(value)
    except ValueError:
        raise ValidationError(
            ValidationErrorCode.INVALID_DOCUMENT_TYPE,
            "document_type",
            f"Document type must be one of: {', '.join(t.value for t in KycDocumentType)}",
        )


def validate_document_number(document_type: KycDocumentType, value) -> str:
    if not isinstance(value, str) or not RAW_DOCUMENT_NUMBER.fullmatch(value):
        raise ValidationError(
            ValidationErrorCode.INVALID_DOCUMENT_NUMBER,
            "document_number",
            "Document number must be 5-50 letters or digits",
        )
    normalized = value.strip().upper()
    if not DOCUMENT_NUMBER_PATTERNS[document_type].fullmatch(normalized):
        raise ValidationError(
            ValidationErrorCode.INVALID_DOCUMENT_NUMBER,
            "document_number",
            f"Document number is not a valid {document_type.value} number",
        )
    return normalized


def validate_full_name(value) -> str:
    name = value.strip() if isinstance(value, str) else ""
    if not (FULL_NAME_MIN <= len(name) <= FULL_NAME_MAX) or not FULL_NAME.fullmatch(name):
        raise ValidationError(
            ValidationErrorCode.INVALID_FULL_NAME,
            "full_name",
            "Full name must be 2-100 characters of letters, spaces, hyphens, apostrophes or periods",
        )
    return name


def validate_date_of_birth(value: Union[date, str, None], today: Optional[date] = None) -> date:
    today = today or date.today()
    if isinstance(value, datetime):
        dob = value.date()
    elif isinstance(value, date):
        dob = value
    else:
        try:
            dob = date.fromisoformat(value)
        except (TypeError, ValueError):
            raise ValidationError(
                ValidationErrorCode.INVALID_DATE_OF_BIRTH,
                "date_of_birth",
                "Date of birth must be a calendar date (YYYY-MM-DD)",
            )
    if not (_years_before(today, MAX_AGE_YEARS) < dob < _years_before(today, MIN_AGE_YEARS)):
        raise ValidationError(
            ValidationErrorCode.INVALID_DATE_OF_BIRTH,
            "date_of_birth",
            "Date of birth is out of the accepted range",
        )
    return dob


def validate_kyc_fields(
    document_type,
    document_number,
    full_name,
    date_of_birth,
    today: Optional[date] = None,
) -> ValidatedKycFields:
    doc_type = validate_document_type(document_type)
    return ValidatedKycFields(
        document_type=doc_type,
        document_number=validate_document_number(doc_type, document_number),
        full_name=validate_full_name(full_name),
        date_of_birth=validate_date_of_birth(date_of_birth, today),
    )


def validate_rejection_reason(reason: Optional[str], max_length: int) -> str:
    text = reason.strip() if isinstance(reason, str) else ""
    if not text or len(text) > max_length:
        raise ValidationError(
            ValidationErrorCode.INVALID_REJECTION_REASON,
            "reason",
            f"A rejection reason of 1-{max_length} characters is required",
        )
    return text


def mask_document_number(number: str) -> str:
    """Keep the first and last four characters, hide the middle.

    Short numbers keep only two at each end so some characters stay hidden.
    """
    keep = 4 if len(number) > 8 else 2
    return f"{number[:keep]}****{number[-keep:]}"
