"""
Request Context for threading request information through operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid


@dataclass
class RequestContext:
    """
    Context object that flows through service operations for log correlation.

    Attributes:
        request_id: Unique identifier for this request
        operation: Name of the service operation (submit_events, poll, ...)
        triggered_by: Source of the call (http, cli, test)
        triggered_at: Timestamp when request was initiated
        client_addr: Remote address of the caller, when known
        correlation_id: Optional ID for correlating related requests
    """
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str = ""
    triggered_by: str = "unknown"
    triggered_at: datetime = field(default_factory=datetime.utcnow)
    client_addr: Optional[str] = None
    correlation_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert context to dict for structured logging."""
        return {
            "request_id": self.request_id,
            "operation": self.operation,
            "triggered_by": self.triggered_by,
            "triggered_at": self.triggered_at.isoformat(),
            "client_addr": self.client_addr,
            "correlation_id": self.correlation_id,
        }

    @classmethod
    def for_http(cls, operation: str, **kwargs) -> "RequestContext":
        """Create context for HTTP request."""
        return cls(operation=operation, triggered_by="http", **kwargs)

    @classmethod
    def for_cli(cls, operation: str, **kwargs) -> "RequestContext":
        """Create context for CLI invocation."""
        return cls(operation=operation, triggered_by="cli", **kwargs)
