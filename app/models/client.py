from dataclasses import dataclass
from typing import Optional


@dataclass
class Client:
    """A hirer. idOrPassport and licenseNumber are stored upper-cased."""
    id: str
    full_name: str
    id_or_passport: str
    phone: str
    license_number: str
    address: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "Client":
        return cls(
            id=d["id"],
            full_name=d.get("fullName", ""),
            id_or_passport=d.get("idOrPassport", ""),
            phone=d.get("phone", ""),
            license_number=d.get("licenseNumber", ""),
            address=d.get("address"),
            created_at=d.get("createdAt"),
        )

    def summary(self) -> dict:
        return {"id": self.id, "fullName": self.full_name, "phone": self.phone}
