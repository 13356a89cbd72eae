from __future__ import annotations

from typing import FrozenSet, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Principal


class PrincipalRepository(Protocol):
    """Repository interface for principals.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Principal]:
        raise NotImplementedError

    def create_principal(
        self,
        *,
        email: str,
        full_name: str,
        password_hash: str,
        role: Role,
        device_id: str,
    ) -> str:
        raise NotImplementedError

    def register_device(self, *, device_id: str, device_type: str) -> None:
        raise NotImplementedError

    def add_course_name(self, principal_id: str, course_name: str) -> FrozenSet[str]:
        """Set-add; adding an existing name is a no-op. Returns the resulting set."""

        raise NotImplementedError

    def remove_course_name(self, principal_id: str, course_name: str) -> FrozenSet[str]:
        """Set-remove; removing a missing name is a no-op. Returns the resulting set."""

        raise NotImplementedError

    def set_term(self, principal_id: str, *, year_id: Optional[str], semester_id: Optional[str]) -> bool:
        raise NotImplementedError

    def update_principal(self, principal_id: str, *, full_name: str, email: str, role: Role) -> bool:
        raise NotImplementedError

    def delete_by_id(self, principal_id: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Principal]:
        raise NotImplementedError
