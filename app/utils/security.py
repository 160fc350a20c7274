"""
Request authentication
"""

import logging
from typing import Optional

from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings
from app.core.exceptions import NotAuthenticatedError
from app.services.dev_state import DevStateStore

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

def resolve_user_id(
    credentials: Optional[HTTPAuthorizationCredentials],
    dev_state: DevStateStore
) -> str:
    """Map a bearer token to its user id.

    In dev mode a request without a token runs as the dev super user,
    which is how the login bypass works.
    """
    if credentials is None or not credentials.credentials:
        if dev_state.enabled:
            return settings.DEV_SUPER_USER_ID
        raise NotAuthenticatedError()

    user_id = settings.AUTH_TOKENS.get(credentials.credentials)
    if not user_id:
        logger.warning("Rejected request with unknown bearer token")
        raise NotAuthenticatedError("Invalid authentication token")
    return user_id
