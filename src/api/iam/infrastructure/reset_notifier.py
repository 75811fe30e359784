"""Password-reset delivery adapters."""

from __future__ import annotations

from typing import Any

import structlog

from iam.ports.session import IPasswordResetNotifier


class LoggingPasswordResetNotifier(IPasswordResetNotifier):
    """Writes reset tokens to the structured log instead of sending email.

    Stand-in delivery channel for environments without an email provider.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger: Any = logger or structlog.get_logger()

    async def send_reset_link(self, email: str, token: str) -> None:
        """Log the reset token for ``email``."""
        self._logger.info("password_reset_link_issued", email=email, token=token)
