"""Domain enumerations and state-transition rules."""

import enum


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class ParcelStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"


class DeliveryStatus(str, enum.Enum):
    NONE = "none"
    RIDER_ASSIGN = "rider_assign"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


class ParcelType(str, enum.Enum):
    DOCUMENT = "document"
    NON_DOCUMENT = "non_document"


class RiderStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"


class WorkStatus(str, enum.Enum):
    FREE = "free"
    BUSY = "busy"


class UserRole(str, enum.Enum):
    USER = "user"
    RIDER = "rider"
    ADMIN = "admin"


class RoleTrigger(str, enum.Enum):
    ADMIN_TOGGLE = "admin_toggle"
    RIDER_PROMOTION = "rider_promotion"


PAYMENT_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    PaymentStatus.UNPAID: {PaymentStatus.PAID},
    PaymentStatus.PAID: set(),
}

# Forward-only: any later stage is reachable once a rider has been dispatched.
DELIVERY_TRANSITIONS: dict[DeliveryStatus, set[DeliveryStatus]] = {
    DeliveryStatus.NONE: {DeliveryStatus.RIDER_ASSIGN},
    DeliveryStatus.RIDER_ASSIGN: {
        DeliveryStatus.PICKED_UP,
        DeliveryStatus.IN_TRANSIT,
        DeliveryStatus.DELIVERED,
    },
    DeliveryStatus.PICKED_UP: {DeliveryStatus.IN_TRANSIT, DeliveryStatus.DELIVERED},
    DeliveryStatus.IN_TRANSIT: {DeliveryStatus.DELIVERED},
    DeliveryStatus.DELIVERED: set(),
}

# Dispatch may replace the rider snapshot until the parcel is picked up.
DISPATCHABLE_STATES: frozenset[DeliveryStatus] = frozenset(
    {DeliveryStatus.NONE, DeliveryStatus.RIDER_ASSIGN}
)

RIDER_TRANSITIONS: dict[RiderStatus, set[RiderStatus]] = {
    RiderStatus.PENDING: {RiderStatus.ACCEPTED},
    RiderStatus.ACCEPTED: set(),
}

# Role changes keyed by trigger. Demotion out of ADMIN depends on the stored
# previous role, so ADMIN has no fixed target under ADMIN_TOGGLE; a rider
# promotion of an admin only rewrites the stored previous role.
ROLE_TRANSITIONS: dict[RoleTrigger, dict[UserRole, UserRole]] = {
    RoleTrigger.ADMIN_TOGGLE: {
        UserRole.USER: UserRole.ADMIN,
        UserRole.RIDER: UserRole.ADMIN,
    },
    RoleTrigger.RIDER_PROMOTION: {
        UserRole.USER: UserRole.RIDER,
        UserRole.RIDER: UserRole.RIDER,
        UserRole.ADMIN: UserRole.ADMIN,
    },
}
