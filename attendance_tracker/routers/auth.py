"""Event password gate route."""
import logging
from fastapi import APIRouter, HTTPException, status

from attendance_tracker.schemas.auth import PasswordCheckIn, PasswordCheckOut
from attendance_tracker.services.password_gate import verify_event_password

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/verify-password", response_model=PasswordCheckOut)
def verify_password(payload: PasswordCheckIn):
    """Check an organizer's shared password for an event."""
    if not verify_event_password(payload.event_name, payload.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")
    return PasswordCheckOut()
