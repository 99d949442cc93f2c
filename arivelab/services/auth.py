"""Password hashing and the signed access token used by the Bearer header and the auth cookie."""
from datetime import datetime, timedelta, timezone
import bcrypt
import jwt
from arivelab.config import get_settings
from arivelab.models.user import UserRole

settings = get_settings()

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _pwd_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: int, email: str, role: UserRole) -> str:
    """Role and email are informational; the account is reloaded on every request."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role.value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def read_access_token(token: str | None) -> tuple[int | None, str | None]:
    """Return (user_id, None) for a valid token, else (None, reason)."""
    token = (token or "").strip()
    if not token:
        return None, "empty token"
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        return None, "token expired"
    except jwt.PyJWTError as e:
        return None, str(e)
    try:
        return int(payload.get("sub")), None
    except (TypeError, ValueError):
        return None, "token has no account id"
