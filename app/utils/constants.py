# app/utils/constants.py

"""
Global constants for roles, booking statuses, and store collections.
These constants are imported by both models and services.
"""


class Role:
    DIRECTOR = "director"
    STAFF = "staff"
    OWNER = "owner"
    CLIENT = "client"


class BookingStatus:
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    ALL = (ACTIVE, COMPLETED, CANCELLED)
    TERMINAL = (COMPLETED, CANCELLED)


class Collection:
    USERS = "users"
    CLIENTS = "clients"
    VEHICLES = "vehicles"
    BOOKINGS = "bookings"

    ALL = (USERS, CLIENTS, VEHICLES, BOOKINGS)


# --- Access policy modules ---
MODULE_BOOKINGS = "bookings"
MODULE_CLIENTS = "clients"
MODULE_VEHICLES = "vehicles"
