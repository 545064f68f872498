"""Slack approval bot forwarding decisions to the workflow engine."""
