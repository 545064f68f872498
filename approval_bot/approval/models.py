"""Data models for the approval interaction."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Decision(Enum):
    """Decision a human takes on a task."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"
    INFO_REQUEST = "INFO_REQUEST"

    @property
    def requires_comment(self) -> bool:
        return self in (Decision.REJECT, Decision.INFO_REQUEST)

    @classmethod
    def parse(cls, value: str) -> Optional["Decision"]:
        """Return the decision for a label, or None if the label is unknown."""
        try:
            return cls((value or "").strip().upper())
        except ValueError:
            return None


class OutcomeStatus(Enum):
    """Normalized status returned by the workflow engine."""

    APPROVED = "approved"
    REJECTED = "reject"
    WITHDRAWN = "withdrawn"
    MORE_INFO = "moreinfo"
    UNKNOWN = "unknown"


@dataclass
class InteractionState:
    """State carried from the decision button to the modal submission.

    Parameters
    ----------
    task_id : str
        Identifier of the task under approval.
    decision : Decision
        Decision captured from the clicked button.
    requester_identity : str
        Person on whose behalf the task exists (usually an email).
    channel_id : str
        Channel of the origin message.
    message_ts : str
        Timestamp of the origin message.
    actor_id : str
        Slack user who clicked the button.
    original_blocks : list[dict]
        Origin message blocks with the interactive blocks removed.
    """

    task_id: str
    decision: Decision
    requester_identity: str
    channel_id: str
    message_ts: str
    actor_id: str
    original_blocks: list[dict] = field(default_factory=list)


@dataclass
class Outcome:
    """Result of a workflow engine call."""

    status_raw: str = ""
    status: OutcomeStatus = OutcomeStatus.UNKNOWN
    message: str = ""
