"""
Flectra Schemas
File: errors.py

Purpose: Standard error taxonomy for the Merkle commitment engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Engine preconditions
    EMPTY_INPUT = "EMPTY_INPUT"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"

    # Merkle & Commitment Errors
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    INVALID_HASH_LENGTH = "INVALID_HASH_LENGTH"

    # Encoding & Schema Errors
    HEX_DECODING_ERROR = "HEX_DECODING_ERROR"
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"

    # Configuration Errors
    UNSUPPORTED_HASH_ALGORITHM = "UNSUPPORTED_HASH_ALGORITHM"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class FlectraError(BaseModel):
    """
    Base error model for structured error communication.

    Used to hand errors across process boundaries (CLI JSON output,
    wire responses) without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
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

    def to_exception(self) -> "FlectraException":
        """Convert this error model to a raised exception."""
        return FlectraException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class FlectraException(Exception):
    """
    Base exception for all Flectra errors.

    Carries structured error information and can be converted
    to/from FlectraError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "FLECTRA_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> FlectraError:
        """Convert this exception to a FlectraError model."""
        return FlectraError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(FlectraException, ValueError):
    """Raised when a tree or root is requested over zero leaves."""

    def __init__(
        self,
        message: str = "Cannot build Merkle tree with no leaves",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class IndexOutOfRangeError(FlectraException, IndexError):
    """Raised when a proof is requested for an index outside the original leaves."""

    def __init__(
        self,
        index: Any,
        leaf_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["index"] = index
        full_details["leaf_count"] = leaf_count
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )
        self.index = index
        self.leaf_count = leaf_count


class InvalidHashLengthError(FlectraException, ValueError):
    """Raised when a value handed in as a hash is not the expected size."""

    def __init__(
        self,
        actual: int,
        expected: int = 32,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["expected"] = expected
        full_details["actual"] = actual
        super().__init__(
            message=f"Expected a {expected}-byte hash, got {actual} bytes",
            code=ErrorCodes.INVALID_HASH_LENGTH,
            details=full_details,
            retryable=False,
        )


class UnsupportedHashAlgorithmError(FlectraException, ValueError):
    """Raised when a hash algorithm name is not registered."""

    def __init__(
        self,
        name: str,
        supported: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {"algorithm": name}
        if supported:
            details["supported"] = supported
        super().__init__(
            message=f"Unsupported hash algorithm: {name!r}",
            code=ErrorCodes.UNSUPPORTED_HASH_ALGORITHM,
            details=details,
            retryable=False,
        )


class ConfigurationError(FlectraException):
    """Raised when runtime configuration is invalid."""

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
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )


class MerkleVerificationException(FlectraException):
    """Raised by callers that treat a failed Merkle proof as fatal."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=full_details,
            retryable=False,
        )
