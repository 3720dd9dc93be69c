"""
Result types for service operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ResultStatus(str, Enum):
    """Status of a service operation."""
    SUCCESS = "success"
    REJECTED = "rejected"  # Invalid input or kind, state untouched
    FAILURE = "failure"    # Internal fault


HTTP_STATUS = {
    ResultStatus.SUCCESS: 200,
    ResultStatus.REJECTED: 400,
    ResultStatus.FAILURE: 500,
}


@dataclass
class ServiceResult:
    """
    Result of a boundary operation, ready for a transport adapter to serialize.

    Attributes:
        status: Outcome of the operation
        payload: Response body (already in wire format)
        error: Error message if rejected or failed
        request_id: ID of the request that produced this result
    """
    status: ResultStatus
    payload: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    request_id: str = ""

    @property
    def success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.status]

    @property
    def interventions(self) -> list[dict]:
        return self.payload.get("interventions", [])

    def to_dict(self) -> dict:
        """Convert to response body."""
        result = dict(self.payload)
        if self.error:
            result["error"] = self.error
        return result

    @classmethod
    def ok(cls, payload: dict, request_id: str = "") -> "ServiceResult":
        """Create a successful result."""
        return cls(status=ResultStatus.SUCCESS, payload=payload, request_id=request_id)

    @classmethod
    def rejected(
        cls,
        error: str,
        payload: Optional[dict] = None,
        request_id: str = "",
    ) -> "ServiceResult":
        """Create a rejected result (caller error, no state change)."""
        return cls(
            status=ResultStatus.REJECTED,
            payload=payload or {},
            error=error,
            request_id=request_id,
        )

    @classmethod
    def fail(
        cls,
        error: str,
        payload: Optional[dict] = None,
        request_id: str = "",
    ) -> "ServiceResult":
        """Create a failed result (internal fault)."""
        return cls(
            status=ResultStatus.FAILURE,
            payload=payload or {},
            error=error,
            request_id=request_id,
        )
