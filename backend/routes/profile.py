import logging

from fastapi import APIRouter, Depends, HTTPException

from database import get_db
from utils.account_deletion import delete_account
from utils.cloudinary import MediaHost, get_media_host
from utils.security import get_current_uid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


# ----------------------------------------
# DELETE ACCOUNT (SELF ONLY)
# ----------------------------------------

@router.delete("")
async def delete_profile(
    uid: str = Depends(get_current_uid),
    media_host: MediaHost = Depends(get_media_host),
    db=Depends(get_db),
):
    try:
        return await delete_account(db, uid, media_host)
    except Exception:
        logger.exception("ACCOUNT_DELETE_ERROR uid=%s", uid)
        raise HTTPException(status_code=500, detail="Failed to delete profile")
