import math

from fastapi import HTTPException

from config.constants import CATEGORIES, UNIVERSITIES


def _bad_request(detail: str):
    return HTTPException(status_code=400, detail=detail)


def require_text(data: dict, field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise _bad_request(f"{field} is required")
    return value.strip()


def parse_price(value) -> float:
    # bools are ints in python; "true" is not a price
    if isinstance(value, bool) or value is None:
        raise _bad_request("price must be a number")

    try:
        price = float(value)
    except (TypeError, ValueError):
        raise _bad_request("price must be a number")

    if math.isnan(price) or math.isinf(price):
        raise _bad_request("price must be a number")
    if price < 0:
        raise _bad_request("price cannot be negative")
    return price


def require_choice(data: dict, field: str, choices) -> str:
    value = require_text(data, field)
    if value not in choices:
        raise _bad_request(f"{field} must be one of: {', '.join(choices)}")
    return value


def parse_photos(value) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
        raise _bad_request("photos must be a list of URLs")
    return [p.strip() for p in value if p.strip()]


def validate_listing_payload(data) -> dict:
    """
    Field checks for listing create/update, in a fixed order:
    name, price, category, university, whatsapp_number.
    The first failure wins and nothing touches the database.
    """
    if not isinstance(data, dict):
        raise _bad_request("Request body must be a JSON object")

    name = require_text(data, "name")
    price = parse_price(data.get("price"))
    category = require_choice(data, "category", CATEGORIES)
    university = require_choice(data, "university", UNIVERSITIES)
    whatsapp_number = require_text(data, "whatsapp_number")

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise _bad_request("description must be a string")

    return {
        "name": name,
        "price": price,
        "description": description,
        "category": category,
        "university": university,
        "photos": parse_photos(data.get("photos")),
        "whatsapp_number": whatsapp_number,
    }
