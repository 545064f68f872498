"""Pytest fixtures for Slack approval bot tests."""

import os
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from slack_sdk.web.async_client import AsyncWebClient

from approval_bot.approval.models import Decision, InteractionState


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run live integration tests that require Slack credentials",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "live: marks tests as live integration tests (require Slack credentials)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless --live flag is passed."""
    if config.getoption("--live"):
        return

    skip_live = pytest.mark.skip(reason="Need --live option to run live tests")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


class FakeResponse:
    """Minimal stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, status: int = 200, body: str | bytes = "", reason: str = "OK"):
        self.status = status
        self.reason = reason
        self._body = body.encode("utf-8") if isinstance(body, str) else body

    async def read(self) -> bytes:
        return self._body

    async def text(self) -> str:
        # Strict decode, like aiohttp when no charset fallback applies
        return self._body.decode("utf-8")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records requests and replays queued responses or exceptions."""

    def __init__(self):
        self.calls: list[tuple[str, str, dict]] = []
        self._queue: list = []

    def queue(self, *items) -> "FakeSession":
        self._queue.extend(items)
        return self

    def _request(self, method: str, url: str, **kwargs):
        self.calls.append((method, url, kwargs))
        item = self._queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def get(self, url, **kwargs):
        return self._request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._request("POST", url, **kwargs)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def origin_blocks() -> list[dict]:
    """Blocks of an approval request message, buttons included."""
    return [
        {"type": "header", "text": {"type": "plain_text", "text": "Invoice approval"}},
        {"type": "section", "text": {"type": "mrkdwn", "text": "*Invoice* INV-1001 for $1,200"}},
        {
            "type": "actions",
            "elements": [
                {"type": "button", "action_id": "approve_invoice", "value": "{}"},
                {"type": "button", "action_id": "reject_invoice", "value": "{}"},
            ],
        },
    ]


@pytest.fixture
def interaction_state(origin_blocks) -> InteractionState:
    return InteractionState(
        task_id="30021",
        decision=Decision.APPROVE,
        requester_identity="jane.doe@example.com",
        channel_id="C123ABC",
        message_ts="1700000000.000100",
        actor_id="U456DEF",
        original_blocks=origin_blocks[:2],
    )


@pytest.fixture
def slack_web_client() -> SimpleNamespace:
    """Mocked Slack client exposing the Web API methods the bot calls."""
    return SimpleNamespace(
        views_open=AsyncMock(return_value={"ok": True}),
        chat_postMessage=AsyncMock(return_value={"ok": True, "ts": "1700000001.000200"}),
        chat_update=AsyncMock(return_value={"ok": True}),
    )


@pytest.fixture
def slack_bot_token() -> str:
    """Get Slack bot token from environment."""
    token = os.environ.get("SLACK_BOT_TOKEN", "")
    if not token:
        pytest.skip("SLACK_BOT_TOKEN environment variable not set")
    return token


@pytest.fixture
def slack_test_channel() -> str:
    """Get test channel ID from environment."""
    channel = os.environ.get("SLACK_TEST_CHANNEL", "")
    if not channel:
        pytest.skip("SLACK_TEST_CHANNEL environment variable not set")
    return channel


@pytest.fixture
def slack_client(slack_bot_token: str) -> AsyncWebClient:
    """Create an async Slack WebClient for live tests."""
    return AsyncWebClient(token=slack_bot_token)


@pytest.fixture
def make_response():
    """Factory for fake aiohttp responses."""
    return FakeResponse
