"""Interactive component handlers for approval requests."""

from slack_bolt.async_app import AsyncApp

from approval_bot.approval.models import Decision
from approval_bot.approval.slack_ui import COMMENT_VIEW_CALLBACK_ID

from .base import HandlerDependencies

# Button action ids of the approval request message
DECISION_ACTIONS: dict[str, Decision] = {
    "approve_invoice": Decision.APPROVE,
    "reject_invoice": Decision.REJECT,
    "more_info_invoice": Decision.INFO_REQUEST,
}


def register_actions(app: AsyncApp, deps: HandlerDependencies) -> None:
    """Register all interactive component handlers.

    Parameters
    ----------
    app : AsyncApp
        The Slack Bolt async app.
    deps : HandlerDependencies
        Shared handler dependencies.
    """

    def make_decision_handler(default_decision: Decision):
        async def handle_decision(ack, action, body, client):
            """Handle a decision button click by opening the confirmation modal."""
            # Slack expects the ack within 3 seconds, before the modal round-trip
            await ack()
            await deps.orchestrator.open_dialog(
                body, action, client, default_decision=default_decision
            )

        return handle_decision

    for action_id, decision in DECISION_ACTIONS.items():
        app.action(action_id)(make_decision_handler(decision))

    @app.view(COMMENT_VIEW_CALLBACK_ID)
    async def handle_comment_submit(ack, view, client):
        """Handle confirmation modal submission."""
        await deps.orchestrator.handle_submission(ack, view, client)
