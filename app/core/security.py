from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import ExpiredSignatureError, JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.config import Settings
from app.core.exceptions import AuthenticationError
import structlog

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Verified caller, valid for the duration of one request."""

    subject: str
    claims: Dict[str, Any] = field(default_factory=dict)


class TokenVerifier:
    """Verifies bearer credentials and issues them for local use."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 30):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenVerifier":
        return cls(
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.jwt_expire_minutes,
        )

    def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.warning("JWT expired")
            raise AuthenticationError("Token has expired")
        except JWTError as e:
            logger.error("JWT validation error", error=str(e))
            raise AuthenticationError("Could not validate credentials")

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationError("Token missing subject")
        return Identity(subject=str(subject), claims=payload)

    def create_access_token(
        self,
        subject: str,
        extra_claims: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else timedelta(minutes=self.expire_minutes))
        claims = dict(extra_claims or {})
        claims.update({"sub": subject, "iat": now, "exp": expire})
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    async def require_identity(
        self,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> Identity:
        """FastAPI dependency guarding every product route."""
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise AuthenticationError("Missing bearer token")
        identity = self.verify(credentials.credentials)
        structlog.contextvars.bind_contextvars(user_id=identity.subject)
        return identity
