# backend/config/constants.py

# -----------------------------
# CAMPUSES
# -----------------------------

UNIVERSITIES = (
    "MUBAS",
    "LUANAR",
    "MZUNI",
    "UNIMA",
    "MUST",
    "Catholic University (CU)",
    "Livingstonia",
    "MAGU",
)

# -----------------------------
# LISTING CATEGORIES
# -----------------------------

CATEGORIES = (
    "Food & Snacks",
    "Fashion & Clothing",
    "Academic Services",
    "Electronics & Gadgets",
    "Beauty & Personal Care",
)

# -----------------------------
# LISTING SORT KEYS
# -----------------------------

SORT_PRICE_ASC = "price_asc"
SORT_PRICE_DESC = "price_desc"
SORT_NEWEST = "newest"          # fallback for anything unrecognised

# -----------------------------
# MEDIA
# -----------------------------

# Cloudinary delivery URLs look like
# https://res.cloudinary.com/<cloud>/image/upload/<transforms>/v<version>/<public_id>.<ext>
CLOUDINARY_PATH_MARKER = "/upload/"
