import json
from datetime import datetime

from models import Listing, Seller


def serialize_datetime(value):
    return value.isoformat() if isinstance(value, datetime) else None


# =========================
# PHOTOS (JSON text column)
# =========================

def encode_photos(photos) -> str:
    return json.dumps(list(photos or []))


def decode_photos(raw: str | None) -> list[str]:
    # a broken column degrades to no photos instead of failing the read
    if not raw:
        return []
    try:
        photos = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(photos, list):
        return []
    return [p for p in photos if isinstance(p, str)]


def serialize_listing(listing: Listing) -> dict:
    return {
        "id": listing.id,
        "seller_uid": listing.seller_uid,
        "name": listing.name,
        "price": listing.price,
        "description": listing.description,
        "category": listing.category,
        "university": listing.university,
        "photos": decode_photos(listing.photos),
        "whatsapp_number": listing.whatsapp_number,
        "created_at": serialize_datetime(listing.created_at),
    }


def serialize_seller(seller: Seller) -> dict:
    return {
        "uid": seller.uid,
        "email": seller.email,
        "business_name": seller.business_name,
        "business_logo": seller.business_logo,
        "university": seller.university,
        "bio": seller.bio,
        "is_verified": bool(seller.is_verified),
        "join_date": serialize_datetime(seller.join_date),
    }
