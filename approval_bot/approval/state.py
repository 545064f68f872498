"""Encoding of the interaction state into Slack view private_metadata.

The modal submission may be handled by a different process than the one
that opened it, so everything needed to finish the interaction travels
inside the view itself.
"""

import json

from loguru import logger

from approval_bot.config import config

from .models import Decision, InteractionState

# Key names match the metadata written by earlier releases of the bot
_STRING_KEYS = ("taskId", "userEmail")
_COORDINATE_KEYS = ("channelId", "messageTs", "clickedBy")


class MalformedStateError(Exception):
    """Raised when view private_metadata cannot be turned back into state."""

    pass


def encode_state(state: InteractionState) -> str:
    """Serialize state for a view's private_metadata."""
    payload = json.dumps(
        {
            "taskId": state.task_id,
            "decision": state.decision.value,
            "userEmail": state.requester_identity,
            "channelId": state.channel_id,
            "messageTs": state.message_ts,
            "clickedBy": state.actor_id,
            "parentNoActions": state.original_blocks,
        },
        separators=(",", ":"),
    )
    max_size = config.limits.max_private_metadata_size
    if len(payload) > max_size:
        logger.warning(
            f"Interaction state for task {state.task_id} is {len(payload)} chars, "
            f"Slack accepts at most {max_size}"
        )
    return payload


def decode_state(raw: str) -> InteractionState:
    """Rebuild state from a view's private_metadata.

    Raises
    ------
    MalformedStateError
        If the metadata is not a complete, well-formed state object.
    """
    try:
        data = json.loads(raw or "")
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedStateError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedStateError("Expected a JSON object")

    for key in _STRING_KEYS:
        if not isinstance(data.get(key), str):
            raise MalformedStateError(f"Missing or invalid field: {key}")
    for key in _COORDINATE_KEYS:
        value = data.get(key)
        if not isinstance(value, str) or not value:
            raise MalformedStateError(f"Missing or invalid field: {key}")

    raw_decision = data.get("decision")
    decision = Decision.parse(raw_decision) if isinstance(raw_decision, str) else None
    if decision is None:
        raise MalformedStateError(f"Unknown decision: {raw_decision!r}")

    blocks = data.get("parentNoActions")
    if blocks is None:
        blocks = []
    if not isinstance(blocks, list) or not all(isinstance(b, dict) for b in blocks):
        raise MalformedStateError("parentNoActions must be a list of blocks")

    return InteractionState(
        task_id=data["taskId"],
        decision=decision,
        requester_identity=data["userEmail"],
        channel_id=data["channelId"],
        message_ts=data["messageTs"],
        actor_id=data["clickedBy"],
        original_blocks=blocks,
    )
