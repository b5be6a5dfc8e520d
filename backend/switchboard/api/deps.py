# switchboard/api/deps.py

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from switchboard.core import conversation as store
from switchboard.core.errors import AuthenticationError
from switchboard.core.security import extract_token, resolve_user_id
from switchboard.infra.database import get_db
from switchboard.models import User


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the caller from the signed auth token, or reject with 401."""
    token = extract_token(request.cookies, request.headers)
    if not token:
        raise AuthenticationError("Not authorized, no token provided")

    user_id = resolve_user_id(token)
    if user_id is None:
        raise AuthenticationError()

    user = store.get_user(db, user_id)
    if user is None:
        raise AuthenticationError()

    return user
