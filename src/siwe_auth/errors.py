"""Verification failures raised and reported by the sign-in pipeline."""

from enum import Enum
from typing import Optional


class NonceFailure(str, Enum):
    """Why a nonce was rejected."""

    EXPIRED = "expired"
    NOT_YET_VALID = "not_yet_valid"

    def __str__(self):
        return self.value


class SignatureFailure(str, Enum):
    """Why a signature was rejected."""

    MALFORMED = "malformed"
    MISMATCH = "mismatch"

    def __str__(self):
        return self.value


class VerificationError(Exception):
    """Top-level validation and verification exception."""

    pass


class InvalidNonce(VerificationError):
    """The nonce is outside of its validity window."""

    def __init__(self, reason: NonceFailure, message: Optional[str] = None):
        """Construct the exception with the failed bound."""
        super().__init__(message or f"Nonce is {reason}")
        self.reason = reason


class InvalidSignature(VerificationError):
    """The signature does not match the message."""

    def __init__(
        self,
        reason: SignatureFailure,
        address: Optional[str] = None,
        message: Optional[str] = None,
    ):
        """Construct the exception, keeping the attempted address for audit."""
        super().__init__(message or f"Signature is {reason}")
        self.reason = reason
        self.address = address


class RecoveryError(Exception):
    """A signer could not be recovered from the signature."""

    pass
