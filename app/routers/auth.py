import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.auth import get_current_user
from app.core.database import get_db
from app.core.errors import Unauthenticated, ValidationError
from app.core.security import create_access_token, create_refresh_token, verify_token
from app.models.user import User
from app.schemas.user import UserCreate, UserResponse, UserEnvelope, LoginRequest, RefreshRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Créer un nouvel utilisateur"""

    # Vérifie si l'email existe déjà
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise ValidationError("Email already in use")

    # Vérifie si le username existe déjà
    existing_username = db.query(User).filter(User.username == user_data.username).first()
    if existing_username:
        raise ValidationError("Username already in use")

    # Crée le new utilisateur
    new_user = User(email=user_data.email, username=user_data.username)
    new_user.set_password(user_data.password)

    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"User {new_user.id} registered")

    return UserEnvelope(data=UserResponse.model_validate(new_user), message="User registered successfully")


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Se connecter et recevoir les tokens"""

    # Cherche l'utilisateur avec son mail
    user = db.query(User).filter(User.email == credentials.email).first()

    # Vérifie le mdp
    if not user or not user.verify_password(credentials.password):
        raise Unauthenticated("Invalid email or password")

    return TokenResponse(
        access_token=create_access_token(user.id, user.email),
        refresh_token=create_refresh_token(user.id, user.email),
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    """Utiliser un refresh_token pour obtenir un nouvel access_token"""

    # Vérifie le refresh_token
    payload = verify_token(body.refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise Unauthenticated("Invalid refresh token")

    user_id = payload.get("user_id")
    user = db.get(User, user_id) if user_id else None
    if not user:
        raise Unauthenticated("Invalid refresh token")

    # Crée un nouveau access_token
    return TokenResponse(
        access_token=create_access_token(user.id, user.email),
        refresh_token=body.refresh_token,
    )


@router.get("/me", response_model=UserEnvelope, response_model_exclude_none=True)
def me(current_user: User = Depends(get_current_user)):
    return UserEnvelope(data=UserResponse.model_validate(current_user))
