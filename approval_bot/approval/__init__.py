"""Approval interaction handling via Slack."""

from .models import Decision, InteractionState, Outcome, OutcomeStatus
from .outcome import normalize_outcome, render_outcome
from .state import MalformedStateError, decode_state, encode_state
