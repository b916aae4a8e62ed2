import logging

from sqlalchemy import delete, select
from starlette.concurrency import run_in_threadpool

from models import Listing, Report, Seller
from utils.cloudinary import MediaHost, collect_public_ids, destroy_many
from utils.serializers import decode_photos

logger = logging.getLogger(__name__)


def collect_media_urls(seller: Seller | None, listings: list[Listing]) -> list[str]:
    """Every photo URL of every listing, then the seller logo. Deduplicated."""
    urls = [url for listing in listings for url in decode_photos(listing.photos)]

    if seller is not None and seller.business_logo:
        urls.append(seller.business_logo)

    return list(dict.fromkeys(urls))


def _load_account(db, uid: str) -> tuple[Seller | None, list[Listing]]:
    seller = db.get(Seller, uid)
    listings = list(
        db.scalars(select(Listing).where(Listing.seller_uid == uid))
    )
    return seller, listings


def _delete_records(db, uid: str) -> int:
    # ids are read again here: listings posted while media was being
    # purged still go, together with their reports
    try:
        listing_ids = list(
            db.scalars(select(Listing.id).where(Listing.seller_uid == uid))
        )
        if listing_ids:
            db.execute(delete(Report).where(Report.listing_id.in_(listing_ids)))
            db.execute(delete(Listing).where(Listing.id.in_(listing_ids)))
        db.execute(delete(Seller).where(Seller.uid == uid))
        db.commit()
    except Exception:
        db.rollback()
        raise

    return len(listing_ids)


async def delete_account(db, uid: str, media_host: MediaHost) -> dict:
    """
    Tear down the caller's seller profile.

    1. load seller + every owned listing
    2. best-effort media purge (failures recorded, never raised)
    3. reports -> listings -> seller, committed together

    Store work runs in the threadpool; only the media calls are awaited
    on the loop. Anything unexpected in 1 or 3 propagates and rolls back.
    """
    seller, listings = await run_in_threadpool(_load_account, db, uid)

    # ---- media (best-effort) ----
    public_ids = collect_public_ids(collect_media_urls(seller, listings))
    media_results = await destroy_many(media_host, public_ids)

    failed = [r["public_id"] for r in media_results if not r["ok"]]
    if failed:
        logger.warning("ACCOUNT_MEDIA_PARTIAL uid=%s failed=%s", uid, failed)

    # ---- records (authoritative) ----
    deleted_listings = await run_in_threadpool(_delete_records, db, uid)

    logger.info(
        "ACCOUNT_DELETED uid=%s listings=%s media=%s",
        uid,
        deleted_listings,
        len(public_ids),
    )

    return {
        "success": True,
        "deletedListings": deleted_listings,
        "deletedCloudinaryAssets": len(public_ids),
        "cloudinaryResults": media_results,
    }
