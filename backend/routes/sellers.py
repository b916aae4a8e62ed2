import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError

from config.constants import UNIVERSITIES
from database import get_db
from utils.jwt import Identity
from utils.security import get_current_identity
from utils.sellers import get_seller, mark_seller_verified, upsert_seller
from utils.serializers import serialize_seller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sellers", tags=["Sellers"])


# ======================================================
# SCHEMAS
# ======================================================

class SellerSync(BaseModel):
    # uid / is_verified in the body are ignored
    email: Optional[EmailStr] = None
    business_name: str = Field(..., min_length=1, max_length=200)
    business_logo: str = Field(..., min_length=1)
    university: str
    bio: Optional[str] = None

    @field_validator("business_name", "business_logo")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("university")
    @classmethod
    def known_university(cls, value: str) -> str:
        if value not in UNIVERSITIES:
            raise ValueError(f"must be one of: {', '.join(UNIVERSITIES)}")
        return value


# ----------------------------------------
# PROFILE SYNC (UPSERT)
# ----------------------------------------

@router.post("")
def sync_seller(
    data: SellerSync,
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
):
    email = data.email or identity.email
    if not email:
        raise HTTPException(status_code=400, detail="email is required")

    profile = data.model_dump()
    profile["email"] = str(email)

    try:
        upsert_seller(db, identity.uid, profile)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("SELLER_SYNC_ERROR uid=%s", identity.uid)
        raise HTTPException(status_code=500, detail="Failed to sync seller profile")

    return {"success": True}


@router.get("/me")
def my_seller_profile(
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
):
    seller = get_seller(db, identity.uid)
    if not seller:
        raise HTTPException(status_code=404, detail="Seller profile not found")
    return serialize_seller(seller)


# ----------------------------------------
# EMAIL VERIFICATION (MONOTONIC)
# ----------------------------------------

@router.post("/verify")
def verify_seller(
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_db),
):
    if not identity.email_verified:
        raise HTTPException(status_code=403, detail="Email address not verified")

    try:
        seller = mark_seller_verified(db, identity.uid)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("SELLER_VERIFY_ERROR uid=%s", identity.uid)
        raise HTTPException(status_code=500, detail="Failed to verify seller")

    if not seller:
        raise HTTPException(status_code=404, detail="Seller profile not found")

    return {"success": True, "is_verified": True}
