from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.session_service import SessionService
from ...core.dependencies import get_session_service
from ...domain.errors import Unauthorized
from ...domain.models import SessionUser

_bearer_scheme = HTTPBearer(auto_error=False)


def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    session_service: SessionService = Depends(get_session_service),
) -> SessionUser:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("Missing bearer token.")
    return session_service.resolve(credentials.credentials)
