"""REST client for the workflow engine (OIC) decision trigger."""

import asyncio
import json
from typing import Optional

import aiohttp
from loguru import logger

from approval_bot.approval.models import Outcome
from approval_bot.approval.outcome import MESSAGE_KEYS, normalize_outcome

from .auth import CredentialProvider


class WorkflowCallError(Exception):
    """Raised when the workflow engine rejects the call or cannot be reached."""

    def __init__(self, http_status: Optional[int], body_message: str):
        self.http_status = http_status
        self.body_message = body_message
        if http_status is None:
            super().__init__(body_message)
        else:
            super().__init__(f"HTTP {http_status}: {body_message}")


def _error_message(body: str) -> str:
    """Extract the message field from an error body, if it is JSON."""
    try:
        data = json.loads(body)
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""
    for key in MESSAGE_KEYS:
        if data.get(key):
            return str(data[key])
    return ""


class WorkflowClient:
    """Submits approval decisions to the workflow engine.

    A new bearer token is requested for every decision.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        credentials: CredentialProvider,
        base_url: str,
        timeout: float = 20.0,
    ):
        self._session = session
        self._credentials = credentials
        self.base_url = base_url
        self.timeout = timeout

    async def submit_decision(
        self,
        task_id: str,
        action: str,
        requester_identity: str,
        comment: str,
        requested_by: str,
    ) -> Outcome:
        """Send one decision and return the normalized outcome.

        Raises
        ------
        AuthError
            If no bearer token could be obtained.
        WorkflowCallError
            On a non-2xx response or a transport failure.
        """
        token = await self._credentials.acquire_credential()

        params = {
            "taskid": str(task_id),
            "action": action,
            "npr": requester_identity or "",
            "comment": comment or "",
            "requestedBy": requested_by,
        }
        logger.info(f"Submitting {action} for task {task_id} (requested by {requested_by})")

        try:
            async with self._session.get(
                self.base_url,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                status = response.status
                reason = response.reason
                body = (await response.read()).decode("utf-8", errors="replace")
        except asyncio.TimeoutError as e:
            raise WorkflowCallError(None, f"Request timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise WorkflowCallError(None, str(e) or type(e).__name__) from e

        if not 200 <= status < 300:
            raise WorkflowCallError(status, _error_message(body) or reason or f"HTTP {status}")

        try:
            data = json.loads(body) if body.strip() else None
        except ValueError:
            logger.warning(f"Workflow engine returned a non-JSON body for task {task_id}")
            data = None

        outcome = normalize_outcome(data)
        logger.info(f"Task {task_id} {action} -> status={outcome.status_raw!r}")
        return outcome
