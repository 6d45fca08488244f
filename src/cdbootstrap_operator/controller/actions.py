"""Action selection for a reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..constants import FINALIZER
from ..models import BootstrapResource


class Action(str, Enum):
    """What a reconciliation pass does with a resource."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "noop"


@dataclass(frozen=True)
class Outcome:
    """Result of a reconciliation pass.

    ``requeue_after`` is the delay before the resource is reconciled again, or
    None to wait for the next change notification.
    """

    action: Action | None
    succeeded: bool
    requeue_after: float | None


def select_action(
    resource: BootstrapResource,
    in_desired_state: Callable[[BootstrapResource], bool],
) -> Action:
    """Choose the action for ``resource``.

    Precedence: deletion requested, then finalizer missing, then replica
    drift. ``in_desired_state`` is only consulted when neither of the first
    two applies.
    """
    if resource.is_being_deleted:
        return Action.DELETE
    if not resource.has_finalizer(FINALIZER):
        return Action.CREATE
    if not in_desired_state(resource):
        return Action.UPDATE
    return Action.NOOP
