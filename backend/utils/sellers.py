import logging
from datetime import datetime

from models import Seller

logger = logging.getLogger(__name__)


def get_seller(db, uid: str) -> Seller | None:
    return db.get(Seller, uid)


def upsert_seller(db, uid: str, profile: dict) -> Seller:
    """
    Create or fully replace the caller's profile.
    uid and join_date are fixed at first sync; is_verified is never
    written here so a stale client cannot downgrade it.
    """
    seller = db.get(Seller, uid)

    if seller is None:
        seller = Seller(uid=uid, is_verified=False, join_date=datetime.utcnow())
        db.add(seller)
        created = True
    else:
        created = False

    seller.email = profile["email"]
    seller.business_name = profile["business_name"]
    seller.business_logo = profile["business_logo"]
    seller.university = profile["university"]
    seller.bio = profile.get("bio")

    db.commit()

    logger.info("SELLER_SYNCED uid=%s created=%s", uid, created)
    return seller


def mark_seller_verified(db, uid: str) -> Seller | None:
    # false -> true only; nothing in the codebase sets it back
    seller = db.get(Seller, uid)
    if seller is None:
        return None

    if not seller.is_verified:
        seller.is_verified = True
        db.commit()
        logger.info("SELLER_VERIFIED uid=%s", uid)

    return seller
