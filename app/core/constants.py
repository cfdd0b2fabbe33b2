"""Domain constants shared by models, schemas and the search services."""

LISTING_RENT = "rent"
LISTING_BUY = "buy"
LISTING_TYPES = (LISTING_RENT, LISTING_BUY)

CATEGORIES = ("room", "flat", "house", "pg", "hostel", "commercial")
FURNISHING_OPTIONS = ("unfurnished", "semi", "fully")

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUS_BLOCKED = "blocked"

# Field names as used on the model (snake_case)
RENT_SPECIFIC_FIELDS = (
    "monthly_rent",
    "security_deposit",
    "maintenance_charge",
    "preferred_tenants",
    "lease_duration",
)
BUY_SPECIFIC_FIELDS = (
    "selling_price",
    "price_per_sqft",
    "possession_status",
    "booking_amount",
    "loan_available",
)

BEDROOMS_OPEN_ENDED = 5

ADMIN_ROLE = "admin"
