import re

from fastapi import HTTPException

from models import Listing

INTEGER_ID = re.compile(r"-?\d+")


# -------------------------------
# Listing id Guard
# -------------------------------

def parse_listing_id(value, name: str = "listing id") -> int:
    text = str(value).strip() if value is not None else ""
    if not INTEGER_ID.fullmatch(text):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return int(text)


# -------------------------------
# Ownership Guard
# -------------------------------

def get_owned_listing(db, listing_id: int, uid: str) -> Listing:
    listing = db.get(Listing, listing_id)

    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")

    if listing.seller_uid != uid:
        raise HTTPException(status_code=403, detail="Forbidden: not your listing")

    return listing
