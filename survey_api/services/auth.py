# survey_api/services/auth.py
from typing import Optional
from fastapi import Header, HTTPException

from survey_api.models.enums import UserRole
from survey_api.models.schemas import SessionInfo
from survey_api.utils.config import settings
from survey_api.utils.logger import logger


def login(name: str, password: Optional[str] = None) -> SessionInfo:
    """
    Participants log in with a name only. Supplying a password asks for the
    admin role, granted when it matches the configured admin password.
    """
    if password is None:
        logger.info(f"Participant '{name}' logged in.")
        return SessionInfo(name=name, role=UserRole.PARTICIPANT, is_admin=False)

    if password != settings.admin_password:
        logger.warning(f"Rejected admin login for '{name}'.")
        raise HTTPException(status_code=401, detail="Incorrect admin password.")

    logger.info(f"Admin '{name}' logged in.")
    return SessionInfo(name=name, role=UserRole.ADMIN, is_admin=True)


async def require_api_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    """Dependency guarding admin routes when an API key is configured."""
    if settings.api_key and x_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")
