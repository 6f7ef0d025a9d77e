from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    if password is None:
        raise ValueError("Password required")
    return pwd_context.hash(str(password))


def verify_password(password: str, password_hash: str) -> bool:
    if password is None or not password_hash:
        return False
    return pwd_context.verify(str(password), password_hash)


def create_access_token(*, subject: str, secret: str, alg: str, expires_seconds: int) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(seconds=expires_seconds)
    payload = {
        "sub": subject,
        "scope": "user",
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=alg)


def decode_token(token: str, secret: str, alg: str) -> dict:
    try:
        return jwt.decode(token, secret, algorithms=[alg])
    except JWTError as e:
        raise ValueError("Invalid token") from e


def bearer_subject(authorization: str | None, secret: str, alg: str) -> str | None:
    """Subject of a valid ``Bearer <jwt>`` header, or None."""
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = decode_token(token, secret, alg)
    except ValueError:
        return None
    return payload.get("sub") or None
