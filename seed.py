"""
Seed script -- populates the database with sample data for reviewers.

Run against an empty database:
    python seed.py

Creates, through the lifecycle service so every row respects the state
machines:
  - 6 sample users (one promoted to admin)
  - 4 rider applications (3 accepted, which promotes their users)
  - 6 sample parcels (mix of unpaid, paid, dispatched and delivered)
"""

import asyncio
import logging

from parceldesk.domain.enums import DeliveryStatus, ParcelType
from parceldesk.infrastructure.database import async_session_factory, create_tables
from parceldesk.services.lifecycle import LifecycleService

logger = logging.getLogger(__name__)


USERS = [
    {"name": "Nadia Rahman", "email": "nadia@example.com"},
    {"name": "Tanvir Hasan", "email": "tanvir@example.com"},
    {"name": "Farhana Akter", "email": "farhana@example.com"},
    {"name": "Rakib Hossain", "email": "rakib@example.com"},
    {"name": "Sadia Islam", "email": "sadia@example.com"},
    {"name": "Imran Kabir", "email": "imran@example.com"},
]

ADMIN_EMAIL = "nadia@example.com"

RIDERS = [
    {"name": "Rakib Hossain", "email": "rakib@example.com", "phone": "01711000001",
     "region": "Dhaka", "warehouse": "Mirpur", "bike_brand": "Honda"},
    {"name": "Sadia Islam", "email": "sadia@example.com", "phone": "01711000002",
     "region": "Dhaka", "warehouse": "Uttara", "bike_brand": "Yamaha"},
    {"name": "Imran Kabir", "email": "imran@example.com", "phone": "01711000003",
     "region": "Chattogram", "warehouse": "Agrabad", "bike_brand": "Bajaj"},
    {"name": "Jamal Uddin", "email": "jamal@example.com", "phone": "01711000004",
     "region": "Sylhet", "warehouse": "Zindabazar"},
]

ACCEPTED_RIDERS = 3


def _parcel(title, owner, cost, parcel_type=ParcelType.NON_DOCUMENT, weight=1.5):
    return owner, {
        "title": title,
        "parcel_type": parcel_type,
        "weight": weight,
        "sender_name": owner.split("@")[0].title(),
        "sender_region": "Dhaka",
        "sender_center": "Mirpur",
        "receiver_name": "Receiver",
        "receiver_contact": "01900000000",
        "receiver_region": "Dhaka",
        "receiver_center": "Uttara",
        "cost": cost,
    }


PARCELS = [
    _parcel("Books", "tanvir@example.com", 120.0),
    _parcel("Contract papers", "tanvir@example.com", 60.0, ParcelType.DOCUMENT, None),
    _parcel("Laptop", "farhana@example.com", 350.0, weight=3.0),
    _parcel("Gift box", "farhana@example.com", 90.0),
    _parcel("Shoes", "nadia@example.com", 150.0, weight=2.0),
    _parcel("Letters", "nadia@example.com", 40.0, ParcelType.DOCUMENT, None),
]

# Index into PARCELS -> how far the delivery has progressed after payment.
PROGRESS = {
    0: DeliveryStatus.DELIVERED,
    2: DeliveryStatus.IN_TRANSIT,
    3: DeliveryStatus.RIDER_ASSIGN,
    4: DeliveryStatus.PICKED_UP,
}


async def seed_sample_data(service: LifecycleService) -> None:
    users = {}
    for data in USERS:
        user, _ = await service.register_user(data["email"], name=data["name"])
        users[user.email] = user
    await service.toggle_admin_role(users[ADMIN_EMAIL].id)

    riders = [await service.register_rider(data) for data in RIDERS]
    for rider in riders[:ACCEPTED_RIDERS]:
        await service.accept_rider(rider.id)

    for index, (owner, details) in enumerate(PARCELS):
        parcel = await service.submit_parcel(owner, details)
        target = PROGRESS.get(index)
        if target is None:
            continue

        await service.record_payment(parcel.id, f"seed_tx_{index}", parcel.cost, owner)
        rider = riders[index % ACCEPTED_RIDERS]
        await service.assign_rider(parcel.id, rider.id)
        await service.dispatch_to_rider(parcel.id, rider.id, rider.name, rider.email)
        if target != DeliveryStatus.RIDER_ASSIGN:
            await service.advance_delivery(parcel.id, target)


async def main() -> None:
    await create_tables()
    async with async_session_factory() as session:
        await seed_sample_data(LifecycleService(session))
        await session.commit()
    logger.info(
        "Seeded %d users, %d riders, %d parcels", len(USERS), len(RIDERS), len(PARCELS)
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
