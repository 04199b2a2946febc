import logging

from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from reqtrace.core.config import Settings
from reqtrace.core.security import decode_access_token
from reqtrace.database import get_session
from reqtrace.models.user import User
from reqtrace.schemas.user import UserRead

logger = logging.getLogger(__name__)

router = APIRouter()
settings = Settings()
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=settings.auth_token_url)


def get_current_user(token: str = Depends(oauth2_scheme), session: Session = Depends(get_session)):
    """El token lo emite el proveedor de identidad; aquí sólo se verifica."""
    credentials_exception = HTTPException(status_code=401, detail="Could not validate credentials")
    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception
    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise credentials_exception

    user = session.get(User, int(user_id))
    if user is None:
        # Primer acceso: se da de alta con los datos del token
        user = User(
            id=int(user_id),
            name=payload.get("name") or payload.get("email") or f"user-{user_id}",
            email=payload.get("email"),
            image=payload.get("image"),
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        logger.info("Provisioned user %s from identity token", user.id)
    return user


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    return current_user
