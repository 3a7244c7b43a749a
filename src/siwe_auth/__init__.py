"""Library for EIP-4361 Sign-In with Ethereum challenges."""

# flake8: noqa: F401
from .config import Settings
from .errors import (
    InvalidNonce,
    InvalidSignature,
    NonceFailure,
    RecoveryError,
    SignatureFailure,
    VerificationError,
)
from .message import ISO8601Datetime, SignInRequest, format_message
from .nonce import Nonce, NonceIssuer, issue_nonce, validate_nonce
from .verifier import (
    EIP191Recoverer,
    SignatureVerifier,
    SignerRecoverer,
    VerificationResult,
    verify,
)
