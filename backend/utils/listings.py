from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import select

from config.constants import SORT_PRICE_ASC, SORT_PRICE_DESC, SORT_NEWEST
from models import Listing, Seller
from utils.serializers import serialize_listing


@dataclass(frozen=True)
class ListingFilters:
    category: str | None = None
    university: str | None = None
    search: str | None = None
    sort_by: str | None = None


def _present(value: str | None) -> str | None:
    # only a missing or empty parameter means "no filter"; anything else
    # is matched exactly as sent
    return value if value else None


def build_predicates(filters: ListingFilters) -> list:
    """
    Ordered WHERE clauses for `filters`. Empty values add nothing.
    Values are bound parameters, never spliced into SQL text.
    """
    predicates = []

    category = _present(filters.category)
    if category:
        predicates.append(Listing.category == category)

    university = _present(filters.university)
    if university:
        predicates.append(Listing.university == university)

    search = _present(filters.search)
    if search:
        predicates.append(
            Listing.name.icontains(search, autoescape=True)
            | Listing.description.icontains(search, autoescape=True)
        )

    return predicates


def resolve_sort(sort_by: str | None) -> str:
    if sort_by in (SORT_PRICE_ASC, SORT_PRICE_DESC):
        return sort_by
    return SORT_NEWEST


def build_order_by(sort_by: str | None) -> list:
    sort_key = resolve_sort(sort_by)

    if sort_key == SORT_PRICE_ASC:
        primary = Listing.price.asc()
    elif sort_key == SORT_PRICE_DESC:
        primary = Listing.price.desc()
    else:
        primary = Listing.created_at.desc()

    # id tie-break keeps equal prices / timestamps reproducible
    return [primary, Listing.id.desc()]


def build_listing_query(filters: ListingFilters):
    return (
        select(
            Listing,
            Seller.business_name,
            Seller.business_logo,
            Seller.is_verified,
        )
        .join(Seller, Listing.seller_uid == Seller.uid)
        .where(*build_predicates(filters))
        .order_by(*build_order_by(filters.sort_by))
    )


def iter_listings(db, filters: ListingFilters) -> Iterator[dict]:
    """Lazily yield listing cards joined with their seller's public fields."""
    result = db.execute(build_listing_query(filters))

    for listing, business_name, business_logo, is_verified in result:
        card = serialize_listing(listing)
        card["business_name"] = business_name
        card["business_logo"] = business_logo
        card["is_verified"] = bool(is_verified)
        yield card


