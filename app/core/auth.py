from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import Unauthenticated
from app.core.security import decode_token
from app.models.user import User


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None)
) -> User:
    # Check token
    if not authorization:
        raise Unauthenticated("No token, authorization denied")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated("Token is not valid")

    user_id = decode_token(token.strip())
    if not user_id:
        raise Unauthenticated("Token is not valid")

    user = db.get(User, user_id)
    if not user:
        raise Unauthenticated("Token is not valid")

    return user
