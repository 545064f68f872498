"""Workflow engine (OIC) access."""

from .auth import AuthError, CredentialProvider
from .client import WorkflowCallError, WorkflowClient
