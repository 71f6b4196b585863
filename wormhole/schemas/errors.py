"""
Module 00 - Schemas
File: errors.py

Purpose: Error taxonomy for the withdrawal protocol.
Defines both Pydantic models for structured error reporting
and Python exceptions for control flow.

Program-side failures (proof-of-work, state proofs, nullifier chain,
accounting) are never retryable. Witness-side fetch failures are.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input errors
    INPUT_MALFORMED = "INPUT_MALFORMED"

    # Secret errors
    PROOF_OF_WORK_FAILED = "PROOF_OF_WORK_FAILED"
    SECRET_SEARCH_EXHAUSTED = "SECRET_SEARCH_EXHAUSTED"

    # State proof errors
    STATE_PROOF_INVALID = "STATE_PROOF_INVALID"
    NULLIFIER_ACCOUNT_MISSING = "NULLIFIER_ACCOUNT_MISSING"

    # Withdrawal history errors
    NULLIFIER_CHAIN_VIOLATION = "NULLIFIER_CHAIN_VIOLATION"

    # Amount errors
    ACCOUNTING_VIOLATION = "ACCOUNTING_VIOLATION"

    # Witness errors
    EXTERNAL_FETCH_FAILED = "EXTERNAL_FETCH_FAILED"

    # Program boundary
    PROGRAM_ABORTED = "PROGRAM_ABORTED"

    # Serialization errors
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class WormholeError(BaseModel):
    """
    Error model for structured error reporting (CLI JSON output, logs).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INPUT_MALFORMED],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class WormholeException(Exception):
    """
    Base exception for all protocol errors.

    Carries structured error information and converts to/from
    WormholeError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "WORMHOLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> WormholeError:
        """Convert this exception to a WormholeError model."""
        return WormholeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InputMalformedException(WormholeException):
    """Raised for wrong-length secrets, negative or overflowing amounts, bad hex."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.INPUT_MALFORMED,
            details=full_details,
            retryable=False,
        )


class ProofOfWorkException(WormholeException):
    """Raised when a secret does not satisfy the proof-of-work difficulty."""

    def __init__(
        self,
        message: str,
        difficulty: int | None = None,
        code: str = ErrorCodes.PROOF_OF_WORK_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if difficulty is not None:
            full_details["difficulty"] = difficulty
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=False,
        )


class SecretSearchExhausted(ProofOfWorkException):
    """Raised when secret generation runs out of its attempt or time budget."""

    def __init__(
        self,
        message: str,
        attempts: int,
        difficulty: int | None = None,
    ) -> None:
        super().__init__(
            message=message,
            difficulty=difficulty,
            code=ErrorCodes.SECRET_SEARCH_EXHAUSTED,
            details={"attempts": attempts},
        )
        self.attempts = attempts


class StateProofException(WormholeException):
    """Raised when a trie proof is malformed or does not match its root."""

    def __init__(
        self,
        message: str,
        proof: str | None = None,
        code: str = ErrorCodes.STATE_PROOF_INVALID,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if proof:
            full_details["proof"] = proof
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=False,
        )


class NullifierAccountMissing(StateProofException):
    """Raised when the nullifier registry account proof ends in a non-leaf node."""

    def __init__(self, message: str = "nullifier account missing") -> None:
        super().__init__(
            message=message,
            proof="nullifier_account",
            code=ErrorCodes.NULLIFIER_ACCOUNT_MISSING,
        )


class NullifierChainException(WormholeException):
    """Raised when the withdrawal index and history inputs are inconsistent."""

    def __init__(
        self,
        message: str,
        withdrawal_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if withdrawal_index is not None:
            full_details["withdrawal_index"] = withdrawal_index
        super().__init__(
            message=message,
            code=ErrorCodes.NULLIFIER_CHAIN_VIOLATION,
            details=full_details,
            retryable=False,
        )


class AccountingException(WormholeException):
    """Raised for a zero, overflowing, or over-withdrawn amount."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ACCOUNTING_VIOLATION,
            details=details,
            retryable=False,
        )


class ExternalFetchException(WormholeException):
    """Raised when the witness builder cannot read chain data."""

    def __init__(
        self,
        message: str,
        fetch: str | None = None,
        endpoint: str | None = None,
        block: int | str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = True,
    ) -> None:
        full_details = details or {}
        if fetch:
            full_details["fetch"] = fetch
        if endpoint:
            full_details["endpoint"] = endpoint
        if block is not None:
            full_details["block"] = block
        super().__init__(
            message=message,
            code=ErrorCodes.EXTERNAL_FETCH_FAILED,
            details=full_details,
            retryable=retryable,
        )
        self.fetch = fetch


class ProgramAbortedException(WormholeException):
    """
    Raised at the program boundary for any failed check.

    Deliberately carries no details: the outside of the proving
    environment only learns that the attempt failed.
    """

    def __init__(self) -> None:
        super().__init__(
            message="program aborted",
            code=ErrorCodes.PROGRAM_ABORTED,
            retryable=False,
        )


class CanonicalizationException(WormholeException):
    """Raised when a value cannot be serialized deterministically."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )
