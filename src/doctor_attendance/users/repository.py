from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, user_id: str, name: str, role: Role, password_hash: str) -> None:
        """Insert a user; raises ``ConflictError`` when the id is taken."""

        raise NotImplementedError

    def update_password(self, user_id: str, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: str) -> bool:
        """Delete a user; their attendance records cascade."""

        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError
