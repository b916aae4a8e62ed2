import logging
from datetime import datetime

from fastapi import HTTPException
from sqlalchemy import delete

from models import Listing, Report, Seller
from utils.guards import get_owned_listing
from utils.serializers import encode_photos

logger = logging.getLogger(__name__)


# ==============================
# Create
# ==============================

def create_listing(db, uid: str, fields: dict) -> int:
    # seller_uid always comes from the verified identity
    if db.get(Seller, uid) is None:
        raise HTTPException(status_code=404, detail="Seller profile not found")

    listing = Listing(
        seller_uid=uid,
        name=fields["name"],
        price=fields["price"],
        description=fields.get("description"),
        category=fields["category"],
        university=fields["university"],
        photos=encode_photos(fields.get("photos")),
        whatsapp_number=fields["whatsapp_number"],
        created_at=datetime.utcnow(),
    )

    db.add(listing)
    db.commit()

    logger.info("LISTING_CREATED id=%s seller=%s", listing.id, uid)
    return listing.id


# ==============================
# Update (owner only, full row)
# ==============================

def update_listing(db, uid: str, listing_id: int, fields: dict) -> Listing:
    listing = get_owned_listing(db, listing_id, uid)

    listing.name = fields["name"]
    listing.price = fields["price"]
    listing.description = fields.get("description")
    listing.category = fields["category"]
    listing.university = fields["university"]
    listing.photos = encode_photos(fields.get("photos"))
    listing.whatsapp_number = fields["whatsapp_number"]

    db.commit()

    logger.info("LISTING_UPDATED id=%s seller=%s", listing_id, uid)
    return listing


# ==============================
# Delete (owner only, reports first)
# ==============================

def delete_listing(db, uid: str, listing_id: int) -> int:
    """Remove the listing and its reports. Returns reports removed."""
    get_owned_listing(db, listing_id, uid)

    reports = db.execute(
        delete(Report).where(Report.listing_id == listing_id)
    ).rowcount
    db.execute(delete(Listing).where(Listing.id == listing_id))
    db.commit()

    logger.info("LISTING_DELETED id=%s seller=%s reports=%s", listing_id, uid, reports)
    return reports
