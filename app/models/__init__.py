"""SQLAlchemy models for the property listings service."""
from app.models.property_model import Property, PropertyAmenity, PropertyFavorite, PropertyPhoto

__all__ = [
    "Property",
    "PropertyAmenity",
    "PropertyFavorite",
    "PropertyPhoto",
]
