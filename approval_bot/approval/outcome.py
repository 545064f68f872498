"""Normalization and rendering of workflow engine results."""

from typing import Any

from .models import Outcome, OutcomeStatus

# The engine is not consistent about key casing, first match wins
STATUS_KEYS = ("Status", "status", "approvalOutcome")
MESSAGE_KEYS = ("Message", "message")

_STATUS_BY_LABEL = {
    status.value: status for status in OutcomeStatus if status is not OutcomeStatus.UNKNOWN
}


def _first_present(data: dict, keys: tuple[str, ...]) -> str:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return str(value)
    return ""


def normalize_outcome(data: Any) -> Outcome:
    """Map a workflow engine response body to an Outcome.

    Status and message are looked up under each known alias in turn. The
    status is matched case-insensitively; anything outside the known
    vocabulary is kept as UNKNOWN together with its raw value.

    Parameters
    ----------
    data : Any
        Decoded JSON body. Non-dict bodies produce an empty UNKNOWN outcome.

    Returns
    -------
    Outcome
        The normalized outcome.
    """
    if not isinstance(data, dict):
        return Outcome()

    status_raw = _first_present(data, STATUS_KEYS)
    message = _first_present(data, MESSAGE_KEYS)
    status = _STATUS_BY_LABEL.get(status_raw.strip().lower(), OutcomeStatus.UNKNOWN)
    return Outcome(status_raw=status_raw, status=status, message=message)


def _with_detail(head: str, detail: str) -> str:
    return f"{head} — {detail}" if detail else head


def render_outcome(outcome: Outcome, actor_id: str) -> tuple[str, str]:
    """Build the thread reply text and the origin message status line.

    Returns
    -------
    tuple[str, str]
        (thread_text, parent_status)
    """
    actor = f"<@{actor_id}>"
    message = outcome.message

    if outcome.status is OutcomeStatus.APPROVED:
        return (
            _with_detail("✅ Approved", message or "success"),
            f"✅ Approved by {actor}",
        )
    if outcome.status is OutcomeStatus.REJECTED:
        return (
            _with_detail("🚫 Rejected", message or "Invoice rejected"),
            f"🚫 Rejected by {actor}",
        )
    if outcome.status is OutcomeStatus.WITHDRAWN:
        # Someone else in the approver group already completed the task
        return (
            _with_detail("ℹ️ Withdrawn", message),
            "ℹ️ Withdrawn - The task is already completed by someone from the approver group.",
        )
    if outcome.status is OutcomeStatus.MORE_INFO:
        return (
            _with_detail("ℹ️ Requested more info", message),
            f"ℹ️ Requested more info by {actor}",
        )

    return (
        _with_detail(f"ℹ️ Result: *{outcome.status_raw or 'unknown'}*", message),
        f"ℹ️ {outcome.status_raw or 'Completed'} by {actor}",
    )
