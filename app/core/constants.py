"""Application constants: roles, approval and KYC states, error codes."""
from enum import Enum


class UserRole(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class DoctorApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class KycDocumentType(str, Enum):
    NIN = "nin"
    PASSPORT = "passport"
    DRIVERS_LICENSE = "drivers_license"
    VOTERS_CARD = "voters_card"
    NATIONAL_ID = "national_id"


class KycStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class KycAuditAction(str, Enum):
    VERIFY = "verify"
    REJECT = "reject"


class AuditOutcome(str, Enum):
    SUCCESS = "success"
    INVALID_TRANSITION = "invalid_transition"
    CONFLICT = "conflict"


class DenialReason(str, Enum):
    NO_ROLE = "NoRole"
    WRONG_ROLE = "WrongRole"
    APPROVAL_PENDING = "ApprovalPending"


class StateErrorCode(str, Enum):
    INVALID_TRANSITION = "InvalidTransition"
    ALREADY_SUBMITTED = "AlreadySubmitted"
    CONFLICT = "Conflict"


class ValidationErrorCode(str, Enum):
    INVALID_DOCUMENT_TYPE = "InvalidDocumentType"
    INVALID_DOCUMENT_NUMBER = "InvalidDocumentNumber"
    INVALID_FULL_NAME = "InvalidFullName"
    INVALID_DATE_OF_BIRTH = "InvalidDateOfBirth"
    INVALID_REJECTION_REASON = "InvalidRejectionReason"
    INVALID_REGISTRATION = "InvalidRegistration"
    INVALID_REQUEST = "InvalidRequest"
