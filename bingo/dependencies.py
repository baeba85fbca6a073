import logging

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session, sessionmaker

from bingo.database import SessionLocal, get_db
from bingo.core.exceptions import AuthenticationError, AuthorizationError
from bingo.core.security import decode_access_token
from bingo.models.user import User
from bingo.repos.user_repo import get_by_id
from bingo.services.notifications import (
    ConnectionRegistry,
    NotificationDispatcher,
    connection_registry,
    notification_dispatcher,
)

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def _user_from_token(db: Session, token: str | None) -> User:
    if not token:
        logger.info("Auth failed: missing bearer credentials")
        raise AuthenticationError("Authentication required")
    user_id = decode_access_token(token)
    if not user_id:
        logger.info("Auth failed: invalid or expired token")
        raise AuthenticationError("Invalid or expired token")
    user = get_by_id(db, user_id)
    if not user or not user.is_active:
        logger.info("Auth failed: user from token not found or inactive")
        raise AuthenticationError("User not found")
    return user


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    return _user_from_token(db, credentials.credentials if credentials else None)


def get_session_factory() -> sessionmaker:
    return SessionLocal


def get_current_user_id_for_stream(
    session_factory: sessionmaker = Depends(get_session_factory),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    access_token: str | None = Query(default=None),
) -> str:
    """
    Authenticate a long-lived stream by bearer header or ?access_token= (EventSource cannot
    send headers). The session is closed before returning so the open stream holds no
    database connection.
    """
    token = credentials.credentials if credentials else access_token
    with session_factory() as db:
        return _user_from_token(db, token).id


def get_current_coach(
    user=Depends(get_current_user),
):
    """Require an authenticated coach."""
    if not getattr(user, "is_coach", False):
        raise AuthorizationError("Coach access required")
    return user


def get_connection_registry() -> ConnectionRegistry:
    return connection_registry


def get_notification_dispatcher() -> NotificationDispatcher:
    return notification_dispatcher
