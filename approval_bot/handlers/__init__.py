"""Handler registration for Slack actions and views."""

from .actions import DECISION_ACTIONS, register_actions
from .base import HandlerDependencies
