"""Slack UI builders for approval messages and the confirmation modal."""

from .models import Decision

COMMENT_VIEW_CALLBACK_ID = "approval_comment_view"
COMMENT_BLOCK_ID = "comment_block"
COMMENT_ACTION_ID = "comment_input"


def strip_action_blocks(blocks: list[dict] | None) -> list[dict]:
    """Return the blocks without interactive ``actions`` blocks, order preserved."""
    return [block for block in blocks or [] if block.get("type") != "actions"]


def with_status_block(blocks: list[dict] | None, text: str) -> list[dict]:
    """Append a read-only status line to a copy of the blocks."""
    return [
        *(blocks or []),
        {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": text}],
        },
    ]


def build_comment_modal(private_metadata: str, decision: Decision, task_id: str) -> dict:
    """Build the confirmation modal opened when a decision button is clicked.

    Args:
        private_metadata: Encoded interaction state
        decision: Decision taken on the task
        task_id: Task under approval

    Returns:
        Slack modal view
    """
    require_comment = decision.requires_comment

    return {
        "type": "modal",
        "callback_id": COMMENT_VIEW_CALLBACK_ID,
        "private_metadata": private_metadata,
        "title": {
            "type": "plain_text",
            "text": "Confirm Action",
        },
        "submit": {
            "type": "plain_text",
            "text": "Submit",
        },
        "close": {
            "type": "plain_text",
            "text": "Cancel",
        },
        "blocks": [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"You are about to *{decision.value}* task *{task_id}*.",
                },
            },
            {
                "type": "input",
                "block_id": COMMENT_BLOCK_ID,
                "optional": not require_comment,
                "label": {
                    "type": "plain_text",
                    "text": "Comment (required)" if require_comment else "Comment",
                },
                "element": {
                    "type": "plain_text_input",
                    "action_id": COMMENT_ACTION_ID,
                    "multiline": True,
                    "placeholder": {
                        "type": "plain_text",
                        "text": "Please Write Comment Here.",
                    },
                },
            },
        ],
    }


def build_state_error_modal() -> dict:
    """Build the modal shown when the submitted state cannot be read."""
    return {
        "type": "modal",
        "title": {
            "type": "plain_text",
            "text": "Confirm Action",
        },
        "close": {
            "type": "plain_text",
            "text": "Close",
        },
        "blocks": [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        ":x: This request could not be processed. "
                        "Please click the button on the original message again."
                    ),
                },
            },
        ],
    }


def processing_text(decision: Decision, task_id: str, actor_id: str) -> str:
    return (
        f"Please wait while we process *{decision.value}* action "
        f"for *{task_id}* by <@{actor_id}>…"
    )


def failure_text(decision: Decision, task_id: str, detail: str) -> str:
    return f"❌ *{decision.value}* failed for *{task_id}*: {detail}"
