from __future__ import annotations

from app.exceptions import DuplicateRecordError, MissingFieldError, NotFoundError, ReferenceInUseError
from app.services.common import is_blank
from app.services.locks import KeyedLocks, client_key
from app.utils.constants import BookingStatus, Collection
from app.utils.logger import get_logger

log = get_logger(__name__)

REQUIRED = ("fullName", "idOrPassport", "phone", "licenseNumber")


def _normalize(data: dict) -> dict:
    """Trim text fields; ID/passport and licence numbers are upper-cased."""
    out = {}
    if "fullName" in data:
        out["fullName"] = (data.get("fullName") or "").strip()
    if "idOrPassport" in data:
        out["idOrPassport"] = (data.get("idOrPassport") or "").strip().upper()
    if "phone" in data:
        out["phone"] = (data.get("phone") or "").strip()
    if "licenseNumber" in data:
        out["licenseNumber"] = (data.get("licenseNumber") or "").strip().upper()
    if "address" in data:
        out["address"] = (data.get("address") or "").strip() or None
    return out


class ClientService:
    """Client registry: add, list, get, edit, delete."""

    def __init__(self, store, locks: KeyedLocks | None = None):
        self.store = store
        self.locks = locks or KeyedLocks()

    def _check_unique(self, fields: dict, exclude_id: str | None = None) -> None:
        for other in self.store.find(Collection.CLIENTS):
            if other["id"] == exclude_id:
                continue
            if fields.get("idOrPassport") and other.get("idOrPassport") == fields["idOrPassport"]:
                raise DuplicateRecordError("Client already exists with this ID/Passport number")
            if fields.get("phone") and other.get("phone") == fields["phone"]:
                raise DuplicateRecordError("Client already exists with this phone number")
            if fields.get("licenseNumber") and other.get("licenseNumber") == fields["licenseNumber"]:
                raise DuplicateRecordError("Client already exists with this license number")

    def add_client(self, data: dict) -> dict:
        data = data or {}
        missing = [f for f in REQUIRED if is_blank(data.get(f))]
        if missing:
            raise MissingFieldError(missing)

        fields = _normalize({**data, "address": data.get("address")})
        self._check_unique(fields)
        rec = self.store.insert(Collection.CLIENTS, fields)
        log.info("Client %s added (%s)", rec["id"], rec["fullName"])
        return rec

    def list_clients(self) -> list[dict]:
        clients = self.store.find(Collection.CLIENTS)
        clients.sort(key=lambda c: c.get("createdAt") or "", reverse=True)
        return clients

    def get_client(self, client_id: str) -> dict:
        rec = self.store.find_by_id(Collection.CLIENTS, client_id)
        if rec is None:
            raise NotFoundError("Client not found")
        return rec

    def update_client(self, client_id: str, data: dict) -> dict:
        self.get_client(client_id)
        fields = _normalize(data or {})
        blank = [f for f in REQUIRED if f in fields and not fields[f]]
        if blank:
            raise MissingFieldError(blank)
        self._check_unique(fields, exclude_id=client_id)
        return self.store.update_by_id(Collection.CLIENTS, client_id, fields)

    def delete_client(self, client_id: str) -> bool:
        """Delete a client unless an Active booking still references it."""
        with self.locks.hold(client_key(client_id)):
            self.get_client(client_id)
            if self.store.find(Collection.BOOKINGS, {"clientId": client_id, "status": BookingStatus.ACTIVE}):
                raise ReferenceInUseError("Cannot delete: client has active bookings")
            self.store.delete_by_id(Collection.CLIENTS, client_id)
        log.info("Client %s deleted", client_id)
        return True
