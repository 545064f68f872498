from typing import Optional

from .models import InteractionState
from .slack_ui import COMMENT_BLOCK_ID

COMMENT_REQUIRED_ERROR = "Comment is required when rejecting."


def validate_submission(
    state: InteractionState, comment: str
) -> tuple[bool, Optional[dict[str, str]]]:
    """
    Validate a confirmation modal submission.

    The modal marks the comment as required for rejections and info requests,
    but that is only a hint to the client, so it is checked again here.

    Returns (True, None) on success, (False, field_errors) on failure where
    field_errors maps block ids to messages for Slack's ``errors`` response.
    """
    if state.decision.requires_comment and not (comment or "").strip():
        return False, {COMMENT_BLOCK_ID: COMMENT_REQUIRED_ERROR}
    return True, None
