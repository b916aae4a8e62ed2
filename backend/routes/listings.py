import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError

from database import get_db
from utils.guards import parse_listing_id
from utils.listing_service import create_listing, delete_listing, update_listing
from utils.listings import ListingFilters, iter_listings
from utils.security import get_current_uid
from utils.validators import validate_listing_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings", tags=["Listings"])


# =========================
# BROWSE / FILTER / SEARCH (PUBLIC)
# =========================

@router.get("")
def list_listings(
    category: Optional[str] = None,
    university: Optional[str] = None,
    search: Optional[str] = Query(None, description="Matches name or description"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    db=Depends(get_db),
):
    filters = ListingFilters(
        category=category,
        university=university,
        search=search,
        sort_by=sort_by,
    )

    try:
        return list(iter_listings(db, filters))
    except SQLAlchemyError:
        logger.exception("LISTINGS_QUERY_ERROR")
        raise HTTPException(status_code=500, detail="Failed to load listings")


# =========================
# SELLER CREATE LISTING
# =========================

@router.post("")
def post_listing(
    payload: Any = Body(None),
    uid: str = Depends(get_current_uid),
    db=Depends(get_db),
):
    fields = validate_listing_payload(payload)

    try:
        listing_id = create_listing(db, uid, fields)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("LISTING_CREATE_ERROR seller=%s", uid)
        raise HTTPException(status_code=500, detail="Failed to create listing")

    return {"id": listing_id}


# =========================
# SELLER UPDATE LISTING (OWNER ONLY)
# =========================

@router.put("/{listing_id}")
def put_listing(
    listing_id: str,
    payload: Any = Body(None),
    uid: str = Depends(get_current_uid),
    db=Depends(get_db),
):
    # id and fields are checked before any query runs
    parsed_id = parse_listing_id(listing_id)
    fields = validate_listing_payload(payload)

    try:
        update_listing(db, uid, parsed_id, fields)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("LISTING_UPDATE_ERROR id=%s seller=%s", parsed_id, uid)
        raise HTTPException(status_code=500, detail="Failed to update listing")

    return {"success": True}


# =========================
# SELLER DELETE LISTING (OWNER ONLY)
# =========================

@router.delete("/{listing_id}")
def remove_listing(
    listing_id: str,
    uid: str = Depends(get_current_uid),
    db=Depends(get_db),
):
    parsed_id = parse_listing_id(listing_id)

    try:
        delete_listing(db, uid, parsed_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("LISTING_DELETE_ERROR id=%s seller=%s", parsed_id, uid)
        raise HTTPException(status_code=500, detail="Failed to delete listing")

    return {"success": True}
