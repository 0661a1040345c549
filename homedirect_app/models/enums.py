from enum import Enum


class UserType(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


class PropertyStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"
    INACTIVE = "inactive"


class OfferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class PaymentStatus(str, Enum):
    COMPLETED = "completed"
    REFUNDED = "refunded"


SELF_ASSIGNABLE_USER_TYPES = frozenset({UserType.BUYER, UserType.SELLER})

RESOLVED_OFFER_STATUSES = frozenset({OfferStatus.ACCEPTED, OfferStatus.REJECTED})
