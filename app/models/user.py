from dataclasses import dataclass


@dataclass
class User:
    """
    Back-office login. The Store keeps raw dicts; this is the public view
    (no password hash) returned by the auth endpoints.
    """
    id: str
    email: str
    name: str
    role: str  # "director" | "staff" | "owner" | "client"

    @classmethod
    def from_dict(cls, d: dict) -> "User":
        return cls(
            id=d["id"],
            email=d.get("email", ""),
            name=d.get("name", ""),
            role=(d.get("role") or "").lower(),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email, "name": self.name, "role": self.role}
