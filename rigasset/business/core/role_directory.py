"""Lookup of users by role, used to address role notifications"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List
from sqlalchemy import select
from rigasset import db
from rigasset.data.core.user import User


class RoleDirectory(ABC):
    """User ids currently holding a role"""

    @abstractmethod
    def users_with_role(self, role: str) -> List[int]:
        """Recipient ids for ``role``, without duplicates"""


class SqlRoleDirectory(RoleDirectory):
    """Active users holding ``role``, read from the users table"""

    def __init__(self, session=None):
        self.session = session or db.session

    def users_with_role(self, role: str) -> List[int]:
        stmt = (
            select(User.id)
            .where(User.role == role, User.status == 'Active')
            .order_by(User.id)
        )
        return list(self.session.execute(stmt).scalars())


class StaticRoleDirectory(RoleDirectory):
    """In-memory directory, keyed by role name"""

    def __init__(self, members: Dict[str, Iterable[int]] = None):
        self.members = {role: list(ids) for role, ids in (members or {}).items()}

    def users_with_role(self, role: str) -> List[int]:
        return list(self.members.get(role, []))
