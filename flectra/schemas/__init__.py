"""
Flectra Schemas
File: __init__.py

Purpose: Export the error taxonomy.
Transport schemas live in flectra.schemas.proof, which depends on the
Merkle engine and is imported from there directly.
"""

# Error models and exceptions
from .errors import (
    ConfigurationError,
    EmptyInputError,
    ErrorCodes,
    FlectraError,
    FlectraException,
    IndexOutOfRangeError,
    InvalidHashLengthError,
    MerkleVerificationException,
    UnsupportedHashAlgorithmError,
)

__all__ = [
    "ConfigurationError",
    "EmptyInputError",
    "ErrorCodes",
    "FlectraError",
    "FlectraException",
    "IndexOutOfRangeError",
    "InvalidHashLengthError",
    "MerkleVerificationException",
    "UnsupportedHashAlgorithmError",
]
