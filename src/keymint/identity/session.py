"""Principal/session snapshots and signed session tokens."""

from dataclasses import dataclass, field
from datetime import datetime

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from keymint.common.models import utcnow

TOKEN_SALT = "operator-session"


@dataclass(frozen=True)
class Principal:
    """An authenticated operator identity."""

    user_id: str
    email: str = ""


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of an authenticated session."""

    principal: Principal
    access_token: str = ""
    issued_at: datetime = field(default_factory=utcnow)


def _get_serializer() -> URLSafeTimedSerializer:
    from keymint.common.config import get_settings
    return URLSafeTimedSerializer(get_settings().secret_key, salt=TOKEN_SALT)


def create_session_token(principal: Principal) -> str:
    """Sign a principal and return the token value."""
    s = _get_serializer()
    return s.dumps({"uid": principal.user_id, "email": principal.email})


def verify_session_token(token: str, max_age: int | None = None) -> Principal | None:
    """Verify and decode a session token. Returns the principal or None."""
    from keymint.common.config import get_settings

    s = _get_serializer()
    if max_age is None:
        max_age = get_settings().session_max_age
    try:
        payload = s.loads(token, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(payload, dict) or not payload.get("uid"):
        return None
    return Principal(user_id=str(payload["uid"]), email=str(payload.get("email", "")))
