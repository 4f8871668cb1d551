from datetime import timedelta

from app import create_app
from app.services.common import _today
from app.utils.constants import Role


def main():
    app = create_app()
    with app.app_context():
        svc = app.extensions["carhire"]
        store = svc.store

        # ---- Director / Staff / Owner / Client demo accounts ----
        svc.users.ensure_demo_users()

        # ---- Demo fleet and clients (create only if none exist) ----
        if not store.find("vehicles"):
            for v in (
                    {"make": "Toyota", "model": "Corolla", "year": 2019, "color": "White",
                     "licensePlate": "KDA 123A", "dailyRate": 4500},
                    {"make": "Nissan", "model": "X-Trail", "year": 2020, "color": "Silver",
                     "licensePlate": "KDB 456B", "dailyRate": 6500},
                    {"make": "Toyota", "model": "Land Cruiser", "year": 2021, "color": "Black",
                     "licensePlate": "KDC 789C", "dailyRate": 12000},
            ):
                svc.vehicles.add_vehicle(v)

        if not store.find("clients"):
            svc.clients.add_client({"fullName": "Jane Wanjiru", "idOrPassport": "28765432",
                                    "phone": "0712345678", "licenseNumber": "dl-100200",
                                    "address": "Westlands, Nairobi"})

        # ---- One upcoming booking so the calendar is not empty ----
        if not store.find("bookings"):
            client = store.find("clients")[0]
            vehicle = store.find("vehicles")[0]
            start = _today() + timedelta(days=2)
            svc.bookings.create_booking({
                "clientId": client["id"],
                "vehicleId": vehicle["id"],
                "startDate": start.isoformat(),
                "endDate": (start + timedelta(days=2)).isoformat(),
            }, role=Role.DIRECTOR)

        store.save()

        print("Seed complete.")
        print("Director login: director@carhire.local / Director123")
        print("Staff login:    staff@carhire.local / Staff123")
        print("Owner login:    owner@carhire.local / Owner123")
        print("Client login:   client@carhire.local / Client123")


if __name__ == "__main__":
    main()
