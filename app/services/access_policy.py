"""Role -> module -> actions permission table."""

from __future__ import annotations

from typing import Dict, List, Optional

from app.exceptions import PermissionDeniedError

# Default table; deployments and tests pass their own to AccessPolicy(...)
DEFAULT_PERMISSIONS: Dict[str, Dict[str, List[str]]] = {
    # Director - full system access and control
    "director": {
        "dashboard": ["view", "export"],
        "clients": ["view", "create", "edit", "delete", "suspend", "export"],
        "vehicles": ["view", "create", "edit", "delete", "assign_owner", "maintenance"],
        "bookings": ["view", "create", "edit", "cancel", "delete", "approve", "dispatch", "checkin"],
        "finance": ["view", "create", "edit", "delete", "generate_reports", "export"],
        "staff": ["view", "create", "edit", "delete", "assign_permissions"],
        "owners": ["view", "create", "edit", "delete", "generate_invoices", "track_earnings"],
        "reports": ["view", "generate", "export", "financial_analysis"],
        "settings": ["view", "edit", "system_config", "backup"],
    },
    # Staff - operational tasks and client management
    "staff": {
        "dashboard": ["view"],
        "clients": ["view", "create", "edit", "suspend"],
        "vehicles": ["view", "edit", "maintenance"],
        "bookings": ["view", "create", "edit", "cancel", "dispatch", "checkin"],
        "finance": ["view", "create", "generate_receipts"],
        "reports": ["view", "generate"],
    },
    # Owner - vehicle and earnings management
    "owner": {
        "dashboard": ["view"],
        "vehicles": ["view"],
        "bookings": ["view"],
        "finance": ["view", "track_earnings", "view_expenses"],
        "reports": ["view", "earnings_report"],
    },
    # Client - self-service booking
    "client": {
        "dashboard": ["view"],
        "vehicles": ["view"],
        "bookings": ["view", "create", "extend"],
        "profile": ["view", "edit"],
    },
}


class AccessPolicy:
    """Answers 'may this role do this action on this module?'."""

    def __init__(self, permissions: Optional[Dict[str, Dict[str, List[str]]]] = None):
        table = DEFAULT_PERMISSIONS if permissions is None else permissions
        self._permissions = {
            (role or "").lower(): {m: list(actions) for m, actions in modules.items()}
            for role, modules in table.items()
        }

    def has_permission(self, role: Optional[str], module: str, action: str) -> bool:
        return action in self.module_permissions(role, module)

    def module_permissions(self, role: Optional[str], module: str) -> List[str]:
        return list(self._permissions.get((role or "").lower(), {}).get(module, []))

    def user_modules(self, role: Optional[str]) -> List[str]:
        return list(self._permissions.get((role or "").lower(), {}))

    def require(self, role: Optional[str], module: str, action: str) -> None:
        if not self.has_permission(role, module, action):
            raise PermissionDeniedError(f"Role '{role or 'anonymous'}' may not {action} {module}")

