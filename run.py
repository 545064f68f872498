#!/usr/bin/env python3
"""Convenience script to run the Slack approval bot."""

import asyncio

from approval_bot.app import main as _main


def main():
    asyncio.run(_main())

if __name__ == "__main__":
    main()
