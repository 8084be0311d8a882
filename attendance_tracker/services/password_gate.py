"""Per-event shared password check for organizers."""
import logging
from typing import Optional

from attendance_tracker.config import settings

logger = logging.getLogger(__name__)


def verify_event_password(
    event_name: str,
    password: str,
    passwords: Optional[dict[str, str]] = None,
) -> bool:
    """True when ``password`` is exactly the shared secret for ``event_name``.

    Event names are matched case-insensitively; unknown events never pass.
    """
    table = settings.EVENT_PASSWORDS if passwords is None else passwords
    expected = table.get(event_name.strip().lower())
    ok = expected is not None and expected == password
    if not ok:
        logger.info("Rejected password for event '%s'", event_name)
    return ok
