"""Approval state machine for one scanned login request.

States: AWAITING_DECISION -> PROCESSING -> APPROVED, or back to
AWAITING_DECISION when the approval call fails. AWAITING_DECISION -> REJECTED
needs no network call. Logout is accepted from any state.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from loguru import logger
from pydantic import BaseModel

from ..auth.client import INVALID_TOKEN_MESSAGE, AuthClient
from ..auth.models import AuthResult, AuthStatus


class ApprovalState(str, Enum):
    """States of a single approval attempt."""

    AWAITING_DECISION = "awaiting_decision"
    PROCESSING = "processing"
    APPROVED = "approved"
    REJECTED = "rejected"


class OutcomeKind(str, Enum):
    """Kinds of approval outcome reported to the caller."""

    APPROVED = "approved"
    REJECTED = "rejected"
    PENDING = "pending"
    FAILED = "failed"


class ApprovalOutcome(BaseModel):
    """User-facing result of the decision on a scanned login request."""

    kind: OutcomeKind
    response_body: Optional[str] = None
    reason: Optional[str] = None


class ApprovalStateMachine:
    """Drives the approve/reject decision for one temp login token."""

    def __init__(self, temp_login_token: Optional[str], client: AuthClient):
        self.temp_login_token = temp_login_token
        self.client = client
        self.state = ApprovalState.AWAITING_DECISION
        self.response_body: Optional[str] = None
        self.last_failure: Optional[AuthResult] = None
        self.logged_out = False

    @property
    def outcome(self) -> ApprovalOutcome:
        if self.state == ApprovalState.APPROVED:
            return ApprovalOutcome(kind=OutcomeKind.APPROVED, response_body=self.response_body)
        if self.state == ApprovalState.REJECTED:
            return ApprovalOutcome(kind=OutcomeKind.REJECTED)
        if self.state == ApprovalState.AWAITING_DECISION and self.last_failure is not None:
            return ApprovalOutcome(kind=OutcomeKind.FAILED, reason=self.last_failure.message)
        return ApprovalOutcome(kind=OutcomeKind.PENDING)

    @property
    def is_terminal(self) -> bool:
        return self.state in (ApprovalState.APPROVED, ApprovalState.REJECTED)

    async def approve(self) -> AuthResult:
        """Send the approval; on failure the machine returns to AWAITING_DECISION."""
        if self.state != ApprovalState.AWAITING_DECISION:
            message = f"Cannot approve while {self.state.value}"
            logger.warning(message)
            return AuthResult.fail(AuthStatus.INVALID_STATE, message)

        if not self.temp_login_token:
            result = AuthResult.fail(AuthStatus.VALIDATION_ERROR, "No temp login token found")
            self.last_failure = result
            return result

        if not self.client.validator.validate(self.temp_login_token):
            result = AuthResult.fail(AuthStatus.VALIDATION_ERROR, INVALID_TOKEN_MESSAGE)
            self.last_failure = result
            return result

        self.state = ApprovalState.PROCESSING
        try:
            result = await self.client.approve(self.temp_login_token)
        except BaseException:
            # Abandoned or crashed mid-flight: the request may be retried
            self.state = ApprovalState.AWAITING_DECISION
            raise

        if result.success:
            self.state = ApprovalState.APPROVED
            self.response_body = result.data
            self.last_failure = None
            logger.info("Approval completed")
        else:
            self.state = ApprovalState.AWAITING_DECISION
            self.last_failure = result
            logger.warning(f"Approval failed ({result.status.value}): {result.message}")

        return result

    def reject(self) -> AuthResult:
        """Reject the request locally; nothing is sent to the server."""
        if self.state != ApprovalState.AWAITING_DECISION:
            message = f"Cannot reject while {self.state.value}"
            logger.warning(message)
            return AuthResult.fail(AuthStatus.INVALID_STATE, message)

        self.state = ApprovalState.REJECTED
        logger.info("Login request rejected")
        return AuthResult.ok(message="Login request rejected")

    async def logout(self) -> AuthResult:
        """Log out from any state; the approval state is left untouched."""
        result = await self.client.logout()
        if result.success:
            self.logged_out = True
        else:
            logger.warning(f"Logout failed ({result.status.value}): {result.message}")
        return result
