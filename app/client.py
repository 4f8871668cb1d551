"""
HTTP client for the car hire API.

Each CarHireClient owns its own requests.Session, so a login or bearer token
belongs to that instance only and never leaks into another caller's requests.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from app.utils.logger import get_logger

log = get_logger(__name__)

DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    """Non-2xx answer from the API; carries the status and the server's error kind."""

    def __init__(self, status: Optional[int], message: str, kind: Optional[str] = None) -> None:
        self.status = status
        self.kind = kind
        self.message = message
        super().__init__(f"{status}: {message}")


class CarHireClient:
    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    # ---------- transport ----------
    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            log.error("%s %s failed: %s", method, url, e)
            raise ApiError(None, "No response from server. Please check your connection.") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = {"message": resp.text}

        if resp.status_code >= 400:
            raise ApiError(resp.status_code, payload.get("message") or "An error occurred", payload.get("error"))
        return payload.get("data", payload)

    # ---------- auth ----------
    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/login", json={"email": email, "password": password})

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")
        self.session.cookies.clear()

    # ---------- bookings ----------
    def list_bookings(self, **filters) -> list:
        return self._request("GET", "/api/bookings", params=filters)

    def get_booking(self, booking_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/bookings/{booking_id}")

    def create_booking(self, client_id: str, vehicle_id: str, start_date: str, end_date: str) -> Dict[str, Any]:
        return self._request("POST", "/api/bookings", json={
            "clientId": client_id,
            "vehicleId": vehicle_id,
            "startDate": start_date,
            "endDate": end_date,
        })

    def update_booking(self, booking_id: str, **patch) -> Dict[str, Any]:
        return self._request("PUT", f"/api/bookings/{booking_id}", json=patch)

    def change_booking_status(self, booking_id: str, status: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/bookings/{booking_id}/status", json={"status": status})

    def delete_booking(self, booking_id: str) -> bool:
        self._request("DELETE", f"/api/bookings/{booking_id}")
        return True

    def check_availability(self, vehicle_id: str, start_date: str, end_date: str) -> bool:
        data = self._request("GET", "/api/bookings/availability", params={
            "vehicleId": vehicle_id, "startDate": start_date, "endDate": end_date,
        })
        return bool(data["available"])

    # ---------- lookups ----------
    def list_clients(self) -> list:
        return self._request("GET", "/api/clients")

    def list_vehicles(self, **filters) -> list:
        return self._request("GET", "/api/vehicles", params=filters)
