"""Base infrastructure for Slack interaction handlers."""

from dataclasses import dataclass

from approval_bot.approval.orchestrator import ApprovalOrchestrator


@dataclass
class HandlerDependencies:
    """Container for handler dependencies.

    Built once at startup and shared by all listeners.
    """

    orchestrator: ApprovalOrchestrator
