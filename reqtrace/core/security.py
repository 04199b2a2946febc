from jose import jwt, JWTError
from datetime import datetime, timedelta
from typing import Optional

from reqtrace.core.config import Settings

settings = Settings()


def create_access_token(data: dict, expires_delta: timedelta = None):
    """Firma un token como lo haría el proveedor de identidad (útil en desarrollo y tests)."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=60))
    to_encode = data.copy()
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
