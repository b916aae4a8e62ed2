from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta

from jose import JWTError, jwt

from config.env import (
    IDENTITY_JWT_SECRET,
    IDENTITY_JWT_ALGORITHM,
    IDENTITY_JWT_AUDIENCE,
    IDENTITY_JWT_ISSUER,
    IDENTITY_TOKEN_MINUTES,
)


@dataclass(frozen=True)
class Identity:
    uid: str
    email: str | None = None
    email_verified: bool = False


class InvalidCredential(Exception):
    pass


class IdentityVerifier(ABC):
    """Turns a bearer credential into a verified subject."""

    @abstractmethod
    async def verify(self, token: str) -> Identity:
        """Return the identity behind `token` or raise InvalidCredential"""


class JwtIdentityVerifier(IdentityVerifier):

    def __init__(
        self,
        secret: str | None = IDENTITY_JWT_SECRET,
        algorithm: str = IDENTITY_JWT_ALGORITHM,
        audience: str | None = IDENTITY_JWT_AUDIENCE,
        issuer: str | None = IDENTITY_JWT_ISSUER,
    ):
        self.secret = (secret or "").strip()
        self.algorithm = algorithm
        self.audience = audience
        self.issuer = issuer

    async def verify(self, token: str) -> Identity:
        if not self.secret:
            raise RuntimeError("IDENTITY_JWT_SECRET is not configured")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError as e:
            raise InvalidCredential(str(e)) from e

        uid = payload.get("sub") or payload.get("user_id") or payload.get("uid")
        if not uid or not isinstance(uid, str):
            raise InvalidCredential("Invalid token payload")

        return Identity(
            uid=uid,
            email=payload.get("email"),
            email_verified=payload.get("email_verified") is True,
        )


def create_access_token(
    uid: str,
    email: str | None = None,
    email_verified: bool = False,
    secret: str | None = IDENTITY_JWT_SECRET,
    minutes: int = IDENTITY_TOKEN_MINUTES,
) -> str:
    """Mint a token the JwtIdentityVerifier accepts (local dev and tests)."""
    secret = (secret or "").strip()
    if not secret:
        raise RuntimeError("IDENTITY_JWT_SECRET is not configured")

    now = datetime.utcnow()
    payload = {
        "sub": uid,
        "email": email,
        "email_verified": email_verified,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    if IDENTITY_JWT_AUDIENCE:
        payload["aud"] = IDENTITY_JWT_AUDIENCE
    if IDENTITY_JWT_ISSUER:
        payload["iss"] = IDENTITY_JWT_ISSUER

    return jwt.encode(payload, secret, algorithm=IDENTITY_JWT_ALGORITHM)
