#!/usr/bin/env python3
"""
Slack Approval Bot - Main Application Entry Point

Relays approve / reject / request-more-info decisions clicked in Slack to
the workflow engine and reflects the result back into the channel.
"""

import asyncio
import signal
import sys

import aiohttp
from aiohttp import web
from loguru import logger
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from approval_bot.approval.orchestrator import ApprovalOrchestrator
from approval_bot.config import config
from approval_bot.handlers import HandlerDependencies, register_actions
from approval_bot.oic.auth import CredentialProvider
from approval_bot.oic.client import WorkflowClient


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def build_orchestrator(session: aiohttp.ClientSession) -> ApprovalOrchestrator:
    """Wire the credential provider, workflow client and orchestrator."""
    credentials = CredentialProvider(
        session,
        token_url=config.IDCS_TOKEN_URL,
        client_id=config.IDCS_CLIENT_ID,
        client_secret=config.IDCS_CLIENT_SECRET,
        scope=config.IDCS_SCOPE,
        timeout=config.timeouts.token,
    )
    workflow_client = WorkflowClient(
        session,
        credentials,
        base_url=config.OIC_REST_ENDPOINT,
        timeout=config.timeouts.workflow,
    )
    return ApprovalOrchestrator(workflow_client)


def create_app(orchestrator: ApprovalOrchestrator) -> AsyncApp:
    """Create the Bolt app with all approval handlers registered."""
    app = AsyncApp(
        token=config.SLACK_BOT_TOKEN,
        signing_secret=config.SLACK_SIGNING_SECRET,
    )
    register_actions(app, HandlerDependencies(orchestrator=orchestrator))
    return app


async def main():
    """Main application entry point."""
    # Validate configuration
    errors = config.validate_required()
    if errors:
        logger.error("Configuration errors:")
        for error in errors:
            logger.error(f"  - {error}")
        sys.exit(1)

    configure_logging(config.LOG_LEVEL)

    session = aiohttp.ClientSession()
    app = create_app(build_orchestrator(session))

    # Setup shutdown handler
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def signal_handler():
        logger.info("Received shutdown signal")
        shutdown_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    try:
        if config.socket_mode:
            handler = AsyncSocketModeHandler(app, config.SLACK_APP_TOKEN)
            await handler.connect_async()
            logger.info("⚡ Bolt app connected to Slack (Socket Mode)")
            await shutdown_event.wait()
            await handler.close_async()
        else:
            runner = web.AppRunner(app.web_app(port=config.PORT))
            await runner.setup()
            await web.TCPSite(runner, port=config.PORT).start()
            logger.info(f"⚡ Bolt app listening on port {config.PORT}")
            await shutdown_event.wait()
            await runner.cleanup()
    finally:
        await session.close()
        logger.info("Shut down")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
