"""Models package."""

__all__ = [
    "user",
    "doctor",
    "patient",
    "session",
    "kyc",
    "audit",
]
