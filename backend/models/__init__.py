from models.seller import Seller
from models.listing import Listing
from models.report import Report

__all__ = ["Seller", "Listing", "Report"]
