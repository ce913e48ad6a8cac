"""Custom exception hierarchy for bouwplan."""

from __future__ import annotations


class BouwplanError(Exception):
    """Base exception for all bouwplan errors."""


class InvalidTransition(BouwplanError):
    """Raised when a status change violates the task or evidence lifecycle."""

    def __init__(self, task_id: str, current_status: str, precondition: str) -> None:
        self.task_id = task_id
        self.current_status = current_status
        self.precondition = precondition
        super().__init__(
            f"Task '{task_id}' ({current_status}): {precondition}"
        )


class UnknownEntity(BouwplanError):
    """Raised when an operation references a task, phase, evidence or tranche id that does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind} '{entity_id}'")


class TrancheNotReady(BouwplanError):
    """Raised when a release is attempted before the tranche is pending."""


class AlreadyReleased(BouwplanError):
    """Raised when a tranche is released a second time."""


class ConfigurationError(BouwplanError):
    """Raised when cost estimation is given a malformed configuration."""
