"""Unit tests for approval Slack UI builders."""

import pytest

from approval_bot.approval.models import Decision
from approval_bot.approval.slack_ui import (
    build_comment_modal,
    build_state_error_modal,
    failure_text,
    processing_text,
    strip_action_blocks,
    with_status_block,
)


class TestStripActionBlocks:
    """Tests for strip_action_blocks."""

    def test_removes_only_actions(self, origin_blocks):
        assert strip_action_blocks(origin_blocks) == origin_blocks[:2]

    def test_order_preserved(self):
        blocks = [
            {"type": "actions", "block_id": "a1"},
            {"type": "section", "block_id": "s1"},
            {"type": "divider", "block_id": "d1"},
            {"type": "actions", "block_id": "a2"},
            {"type": "context", "block_id": "c1"},
        ]

        result = strip_action_blocks(blocks)

        assert [b["block_id"] for b in result] == ["s1", "d1", "c1"]

    @pytest.mark.parametrize("blocks", [None, []])
    def test_empty(self, blocks):
        assert strip_action_blocks(blocks) == []


class TestWithStatusBlock:
    """Tests for with_status_block."""

    def test_appends_context_block(self, origin_blocks):
        kept = origin_blocks[:2]

        result = with_status_block(kept, "✅ Approved by <@U1>")

        assert result[:2] == kept
        assert result[2] == {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": "✅ Approved by <@U1>"}],
        }
        assert len(kept) == 2  # input not mutated

    def test_empty_blocks_give_single_status(self):
        result = with_status_block([], "done")

        assert len(result) == 1
        assert result[0]["type"] == "context"


class TestCommentModal:
    """Tests for build_comment_modal."""

    def test_approve_comment_optional(self):
        view = build_comment_modal("{}", Decision.APPROVE, "42")
        input_block = view["blocks"][1]

        assert view["callback_id"] == "approval_comment_view"
        assert view["private_metadata"] == "{}"
        assert input_block["optional"] is True
        assert input_block["label"]["text"] == "Comment"

    @pytest.mark.parametrize("decision", [Decision.REJECT, Decision.INFO_REQUEST])
    def test_comment_required(self, decision):
        view = build_comment_modal("{}", decision, "42")
        input_block = view["blocks"][1]

        assert input_block["optional"] is False
        assert input_block["label"]["text"] == "Comment (required)"
        assert input_block["block_id"] == "comment_block"
        assert input_block["element"]["action_id"] == "comment_input"

    def test_summary(self):
        view = build_comment_modal("{}", Decision.REJECT, "42")

        assert view["blocks"][0]["text"]["text"] == "You are about to *REJECT* task *42*."

    def test_error_modal_has_no_submit(self):
        view = build_state_error_modal()

        assert "submit" not in view
        assert "could not be processed" in view["blocks"][0]["text"]["text"]


def test_processing_text():
    text = processing_text(Decision.APPROVE, "42", "U1")

    assert "*APPROVE*" in text
    assert "*42*" in text
    assert "<@U1>" in text


def test_failure_text():
    assert failure_text(Decision.REJECT, "42", "boom") == "❌ *REJECT* failed for *42*: boom"
