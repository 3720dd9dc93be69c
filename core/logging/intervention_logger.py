"""
Intervention Logger

Provides request-scoped logging for service operations, plus the process
console handler setup.
"""

import logging
from typing import Optional, Union

from core.context import RequestContext
from core.models import ActiveIntervention, RestoreCommand

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """Install a console handler on the root logger (once)."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)


class InterventionLogger:
    """
    Structured logger bound to a request context.

    Usage:
        log = InterventionLogger(ctx)
        log.info("Processing 3 events for potential interventions")
        log.activated(intervention)
        log.restore_sent(command)
    """

    def __init__(
        self,
        ctx: RequestContext,
        name: str = "intervention-server",
    ):
        self.ctx = ctx
        self._logger = logging.getLogger(name)

        # Ensure we have a handler
        if not self._logger.handlers and not logging.getLogger().handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self._logger.addHandler(handler)
            self._logger.setLevel(logging.INFO)

    def _log(self, level: int, message: str, data: Optional[dict] = None) -> None:
        """Internal log method with request prefix."""
        prefix = f"[{self.ctx.request_id[:8]}]"
        if self.ctx.operation:
            prefix += f" [{self.ctx.operation}]"

        full_message = f"{prefix} {message}"
        if data:
            details = " ".join(f"{k}={v}" for k, v in data.items())
            full_message = f"{full_message} ({details})"
        self._logger.log(level, full_message)

    def debug(self, message: str, data: Optional[dict] = None) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, data)

    def info(self, message: str, data: Optional[dict] = None) -> None:
        """Log info message."""
        self._log(logging.INFO, message, data)

    def warning(self, message: str, data: Optional[dict] = None) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, data)

    def error(self, message: str, error: Optional[str] = None) -> None:
        """Log error message."""
        if error:
            message = f"{message}: {error}"
        self._log(logging.ERROR, message)

    def exception(self, message: str) -> None:
        """Log error message with the active traceback."""
        self._logger.exception(f"[{self.ctx.request_id[:8]}] {message}")

    def activated(self, intervention: ActiveIntervention, forced: bool = False) -> None:
        """Log an intervention entering the active slot."""
        label = "FORCED INTERVENTION CREATED" if forced else "INTERVENTION ACTIVATED"
        proposal = intervention.proposal
        self._log(
            logging.INFO,
            f"{label}: {proposal.kind.node} {proposal.action.value} "
            f"- active for {proposal.duration / 1000:g}s",
        )

    def restore_sent(self, command: RestoreCommand) -> None:
        """Log a restore command handed to a poller."""
        if command.original_kind is not None:
            self._log(
                logging.INFO,
                f"EXPIRED INTERVENTION DETECTED: {command.original_kind.node} "
                f"- sending restore command",
            )
        else:
            self._log(logging.INFO, "Recently concluded intervention - reinforcing restore command")

    def suppressed(self, reason: str) -> None:
        """Log why no intervention was triggered."""
        self._log(logging.INFO, f"No intervention triggered: {reason}")


def get_logger(ctx: RequestContext) -> InterventionLogger:
    """
    Create an InterventionLogger for the given context.

    Args:
        ctx: Request context

    Returns:
        Configured InterventionLogger
    """
    return InterventionLogger(ctx)
