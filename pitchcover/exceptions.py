"""
Application Exceptions Module.

Centralized exception definitions with:
- Error codes for client handling
- HTTP status code mapping
- A retryable flag so the UI can offer "try again"

The calculation engine never raises these for in-domain inputs. They are
raised by the catalog lookups, the forecast client and the match-day session.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


# ============================================================================
# ERROR CODES
# ============================================================================


class ErrorCode(str, Enum):
    """Application error codes."""

    # General errors (1xxx)
    INTERNAL_ERROR = "E1000"
    VALIDATION_ERROR = "E1001"
    NOT_FOUND = "E1002"
    CONFLICT = "E1003"

    # Catalog errors (4xxx)
    STADIUM_NOT_FOUND = "E4000"
    TIER_NOT_FOUND = "E4001"

    # Session errors (4xxx)
    POLICY_STATE = "E4100"
    INSUFFICIENT_FUNDS = "E4101"

    # External service errors (5xxx)
    DATA_FETCH_FAILURE = "E5000"
    MALFORMED_DATA = "E5001"


# ============================================================================
# ERROR RESPONSE MODEL
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str
    message: str
    retryable: bool = False
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """
    Standard error response.

    All API errors return this unified format for consistency.
    """

    error: ErrorDetail
    request_id: Optional[str] = None
    timestamp: Optional[str] = None


# ============================================================================
# BASE EXCEPTION
# ============================================================================


class PitchCoverError(Exception):
    """Base exception for the PitchCover application."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        retryable: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.retryable = retryable
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            error=ErrorDetail(
                code=self.code.value,
                message=self.message,
                retryable=self.retryable,
                details=self.details,
            ),
            request_id=request_id,
            timestamp=datetime.utcnow().isoformat(),
        )


# ============================================================================
# FORECAST SOURCE
# ============================================================================


class DataFetchFailure(PitchCoverError):
    """Forecast source unreachable, timed out, or returned a non-success status."""

    def __init__(
        self,
        message: str = "Weather data is unavailable. Please try again.",
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.DATA_FETCH_FAILURE,
        status_code: int = 503,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            retryable=True,
            details=details,
        )


class MalformedDataFailure(DataFetchFailure):
    """Forecast payload is missing expected fields."""

    def __init__(
        self,
        message: str = "Weather data could not be read. Please try again.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            details=details,
            code=ErrorCode.MALFORMED_DATA,
            status_code=502,
        )


# ============================================================================
# CATALOG
# ============================================================================


class UnknownStadiumError(PitchCoverError):
    """Stadium id not in the catalog."""

    def __init__(self, stadium_id: str):
        super().__init__(
            message=f"Stadium not found: {stadium_id}",
            code=ErrorCode.STADIUM_NOT_FOUND,
            status_code=404,
            details={"stadium_id": stadium_id},
        )


class UnknownTierError(PitchCoverError):
    """Tier id not in the catalog."""

    def __init__(self, tier_id: str):
        super().__init__(
            message=f"Insurance tier not found: {tier_id}",
            code=ErrorCode.TIER_NOT_FOUND,
            status_code=404,
            details={"tier_id": tier_id},
        )


# ============================================================================
# SESSION
# ============================================================================


class PolicyStateError(PitchCoverError):
    """Operation not allowed in the current policy lifecycle state."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code=ErrorCode.POLICY_STATE,
            status_code=409,
        )


class InsufficientFundsError(PitchCoverError):
    """Wallet balance below the premium."""

    def __init__(self, balance: int, premium: int):
        super().__init__(
            message=f"Wallet balance {balance} is below premium {premium}",
            code=ErrorCode.INSUFFICIENT_FUNDS,
            status_code=402,
            details={"balance": balance, "premium": premium},
        )
