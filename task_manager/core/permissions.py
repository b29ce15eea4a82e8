import logging
from dataclasses import dataclass
from typing import Optional

from task_manager.config import settings
from task_manager.core.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated identity of the current request."""

    id: int
    email: str


def authorize(principal: Optional[Principal], owner_email: Optional[str], message: str = "You are not authorized to perform this operation") -> None:
    """
    Allow when there is no principal (system bootstrap) or when the
    principal's email equals the owner's email exactly.
    """
    if principal is None:
        return
    if principal.email != owner_email:
        logger.warning("Denied %s: owner is %s", principal.email, owner_email)
        raise ForbiddenError(message)


def authorize_label_change(principal: Optional[Principal], label_name: str, action: str = "update") -> None:
    """Legacy rule: one configured user may not touch one configured label."""
    if principal is None or not settings.legacy_label_guard_enabled:
        return
    if principal.email == settings.LEGACY_LABEL_GUARD_EMAIL and label_name == settings.LEGACY_LABEL_GUARD_NAME:
        logger.warning("Denied %s on label %r for %s", action, label_name, principal.email)
        raise ForbiddenError(f"You are not authorized to {action} this label")
