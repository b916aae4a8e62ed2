import asyncio
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from config.env import IDENTITY_TIMEOUT_SECONDS
from utils.jwt import Identity, IdentityVerifier, InvalidCredential, JwtIdentityVerifier

logger = logging.getLogger(__name__)

# auto_error=False so a missing header answers 401, not HTTPBearer's 403
security = HTTPBearer(auto_error=False)

_verifier: IdentityVerifier | None = None


def get_identity_verifier() -> IdentityVerifier:
    global _verifier
    if _verifier is None:
        _verifier = JwtIdentityVerifier()
    return _verifier


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Identity:
    if credentials is None or not (credentials.credentials or "").strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization Bearer token",
        )

    token = credentials.credentials.strip()

    try:
        return await asyncio.wait_for(
            verifier.verify(token),
            timeout=IDENTITY_TIMEOUT_SECONDS,
        )
    except InvalidCredential as e:
        logger.info("AUTH_REJECTED reason=%s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    except asyncio.TimeoutError:
        logger.error("AUTH_TIMEOUT after=%ss", IDENTITY_TIMEOUT_SECONDS)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Identity verification timed out",
        )


async def get_current_uid(identity: Identity = Depends(get_current_identity)) -> str:
    return identity.uid
