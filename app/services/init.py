from dataclasses import dataclass

from .access_policy import AccessPolicy
from .booking_service import BookingService
from .client_service import ClientService
from .locks import KeyedLocks
from .user_service import UserService
from .vehicle_service import VehicleService


@dataclass
class Services:
    """Per-application service objects, all sharing one store, policy and lock table."""
    store: object
    policy: AccessPolicy
    bookings: BookingService
    clients: ClientService
    vehicles: VehicleService
    users: UserService


def build_services(store, policy=None, clock=None) -> Services:
    policy = policy or AccessPolicy()
    locks = KeyedLocks()
    return Services(
        store=store,
        policy=policy,
        bookings=BookingService(store, policy, locks, clock),
        clients=ClientService(store, locks),
        vehicles=VehicleService(store, locks),
        users=UserService(store),
    )


__all__ = [
    "Services",
    "build_services",
    "BookingService",
    "ClientService",
    "VehicleService",
    "UserService",
]
