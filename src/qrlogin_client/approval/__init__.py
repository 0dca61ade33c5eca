"""Approval decision flow for scanned login requests."""

from .state_machine import ApprovalOutcome, ApprovalState, ApprovalStateMachine, OutcomeKind

__all__ = ["ApprovalOutcome", "ApprovalState", "ApprovalStateMachine", "OutcomeKind"]
