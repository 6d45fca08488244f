"""Reconciliation of CDBootstrap resources."""

from .actions import Action, Outcome, select_action
from .credentials import CredentialBootstrap, CredentialOutcome, vault_secret_name
from .desired_state import DesiredStateComparator
from .driver import Driver
from .finalizer import FinalizerProtocol
from .reconciler import Reconciler
from .status import StatusReporter

__all__ = [
    "Action",
    "CredentialBootstrap",
    "CredentialOutcome",
    "DesiredStateComparator",
    "Driver",
    "FinalizerProtocol",
    "Outcome",
    "Reconciler",
    "StatusReporter",
    "select_action",
    "vault_secret_name",
]
