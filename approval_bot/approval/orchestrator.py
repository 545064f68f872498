"""Approval interaction flow: button click, confirmation modal, backend call.

A decision travels through these steps:

1. A decision button is clicked. The listener acks right away and the
   orchestrator opens a confirmation modal. Everything needed later is
   encoded into the modal's private_metadata.
2. The modal is submitted. The state is decoded and the comment validated;
   an invalid submission keeps the modal open with a field error.
3. The modal is closed and a "processing" reply is posted in the thread of
   the origin message.
4. The workflow engine is called. On success the reply is updated with the
   result and the origin message is redrawn without its buttons. On failure
   the reply shows the error and the buttons are left in place for a retry.
"""

import json
from typing import Any, Awaitable, Callable, Optional

import aiohttp
from loguru import logger
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from approval_bot.config import config
from approval_bot.oic.auth import AuthError
from approval_bot.oic.client import WorkflowCallError, WorkflowClient

from .models import Decision, InteractionState, Outcome
from .outcome import render_outcome
from .slack_ui import (
    COMMENT_ACTION_ID,
    COMMENT_BLOCK_ID,
    build_comment_modal,
    build_state_error_modal,
    failure_text,
    processing_text,
    strip_action_blocks,
    with_status_block,
)
from .state import MalformedStateError, decode_state, encode_state
from .validators import validate_submission

UNKNOWN_ERROR = "Unknown error"

# Failures of a Slack Web API call that must not abort the interaction
SLACK_ERRORS = (SlackApiError, aiohttp.ClientError, TimeoutError, OSError)


def parse_submission(view: dict) -> tuple[InteractionState, str]:
    """Read the interaction state and the trimmed comment from a submitted view.

    Raises
    ------
    MalformedStateError
        If the view's private_metadata is not a valid state.
    """
    state = decode_state(view.get("private_metadata", ""))
    values = view.get("state", {}).get("values", {})
    comment = values.get(COMMENT_BLOCK_ID, {}).get(COMMENT_ACTION_ID, {}).get("value") or ""
    return state, comment.strip()


def _error_detail(error: Exception) -> str:
    if isinstance(error, WorkflowCallError) and error.body_message:
        return error.body_message
    return str(error) or UNKNOWN_ERROR


class ApprovalOrchestrator:
    """Drives approval interactions.

    Holds no per-interaction state: whatever a later step needs travels in
    the InteractionState encoded into the modal.

    Parameters
    ----------
    workflow_client : WorkflowClient
        Client used to submit decisions to the workflow engine.
    """

    def __init__(self, workflow_client: WorkflowClient):
        self.workflow_client = workflow_client

    async def open_dialog(
        self,
        body: dict,
        action: dict,
        client: AsyncWebClient,
        default_decision: Optional[Decision] = None,
    ) -> Optional[InteractionState]:
        """Open the confirmation modal for a clicked decision button.

        The caller must already have acked the action.

        Parameters
        ----------
        body : dict
            Slack block_actions payload.
        action : dict
            The clicked button; its value is a JSON object with
            ``taskId``, ``action`` and ``userEmail``.
        client : AsyncWebClient
            Slack client for the current request.
        default_decision : Decision, optional
            Decision implied by the button when its value does not carry one.

        Returns
        -------
        InteractionState or None
            The state carried by the modal, or None if the click was dropped.
        """
        action_value = action.get("value") or "{}"
        max_size = config.limits.max_action_value_size
        if len(action_value) > max_size:
            logger.error(f"Action value too large: {len(action_value)} bytes")
            return None

        try:
            data = json.loads(action_value)
            channel_id = body["channel"]["id"]
            message = body["message"]
            user_id = body["user"]["id"]
            trigger_id = body["trigger_id"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.error(f"Invalid decision action data: {e}")
            return None
        if not isinstance(data, dict):
            logger.error(f"Decision action value is not an object: {action_value[:100]}")
            return None

        decision = Decision.parse(str(data.get("action") or "")) or default_decision
        if decision is None:
            logger.error(f"Unknown decision in action value: {data.get('action')!r}")
            return None

        state = InteractionState(
            task_id=str(data.get("taskId") or ""),
            decision=decision,
            requester_identity=str(data.get("userEmail") or ""),
            channel_id=channel_id,
            message_ts=message["ts"],
            actor_id=user_id,
            original_blocks=strip_action_blocks(message.get("blocks")),
        )

        try:
            await client.views_open(
                trigger_id=trigger_id,
                view=build_comment_modal(encode_state(state), decision, state.task_id),
            )
        except SLACK_ERRORS as e:
            logger.error(f"Failed to open confirmation modal for task {state.task_id}: {e}")
            return None

        logger.info(f"{decision.value} modal opened for task {state.task_id} by {user_id}")
        return state

    async def handle_submission(
        self,
        ack: Callable[..., Awaitable[Any]],
        view: dict,
        client: AsyncWebClient,
    ) -> Optional[Outcome]:
        """Validate a modal submission, close the modal and process the decision."""
        try:
            state, comment = parse_submission(view)
        except MalformedStateError as e:
            logger.error(f"Discarding approval submission with malformed state: {e}")
            await ack(response_action="update", view=build_state_error_modal())
            return None

        valid, errors = validate_submission(state, comment)
        if not valid:
            await ack(response_action="errors", errors=errors)
            return None

        await ack()
        return await self.process(state, comment, client)

    async def _post_progress(self, state: InteractionState, client: AsyncWebClient) -> Optional[str]:
        try:
            response = await client.chat_postMessage(
                channel=state.channel_id,
                thread_ts=state.message_ts,
                text=processing_text(state.decision, state.task_id, state.actor_id),
            )
        except SLACK_ERRORS as e:
            logger.warning(f"Pre-status reply failed: {e}")
            return None
        return response.get("ts")

    async def _reply(
        self,
        state: InteractionState,
        client: AsyncWebClient,
        progress_ts: Optional[str],
        text: str,
    ) -> None:
        """Update the progress reply in place, or post a new thread reply."""
        if progress_ts:
            await client.chat_update(channel=state.channel_id, ts=progress_ts, text=text)
        else:
            await client.chat_postMessage(
                channel=state.channel_id,
                thread_ts=state.message_ts,
                text=text,
            )

    async def _reply_failure(
        self,
        state: InteractionState,
        client: AsyncWebClient,
        progress_ts: Optional[str],
        detail: str,
    ) -> None:
        try:
            await self._reply(
                state,
                client,
                progress_ts,
                failure_text(state.decision, state.task_id, detail),
            )
        except SLACK_ERRORS as e:
            logger.error(f"Failed to post failure reply for task {state.task_id}: {e}")

    async def process(
        self,
        state: InteractionState,
        comment: str,
        client: AsyncWebClient,
    ) -> Optional[Outcome]:
        """Submit the decision and reconcile the thread reply and origin message.

        Returns
        -------
        Outcome or None
            The outcome on success, None if the workflow call failed.
        """
        progress_ts = await self._post_progress(state, client)

        try:
            outcome = await self.workflow_client.submit_decision(
                task_id=state.task_id,
                action=state.decision.value,
                requester_identity=state.requester_identity,
                comment=comment,
                requested_by=state.actor_id,
            )
        except (AuthError, WorkflowCallError) as e:
            detail = _error_detail(e)
            logger.error(f"OIC call failed for task {state.task_id}: {detail}")
            await self._reply_failure(state, client, progress_ts, detail)
            return None
        except Exception as e:
            logger.exception(f"Unexpected error calling OIC for task {state.task_id}: {e}")
            await self._reply_failure(state, client, progress_ts, _error_detail(e))
            return None

        thread_text, parent_status = render_outcome(outcome, state.actor_id)

        try:
            await self._reply(state, client, progress_ts, thread_text)
        except SLACK_ERRORS as e:
            logger.warning(f"Failed to post result reply for task {state.task_id}: {e}")

        # Buttons go away for good once the engine has accepted the decision
        try:
            await client.chat_update(
                channel=state.channel_id,
                ts=state.message_ts,
                text=parent_status,
                blocks=with_status_block(state.original_blocks, parent_status),
            )
        except SLACK_ERRORS as e:
            logger.error(f"Failed to update origin message for task {state.task_id}: {e}")

        logger.info(
            f"Task {state.task_id} {state.decision.value} resolved: {outcome.status_raw or 'unknown'}"
        )
        return outcome
