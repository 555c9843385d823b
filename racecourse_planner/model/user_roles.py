"""Race committee roles and the permissions they grant.

Roles are persisted and their bit values must never change. Permissions
are derived from roles at runtime, so the mapping may evolve freely.
Nothing here enforces permissions; an outer layer consults them.
"""

from dataclasses import dataclass
from enum import IntFlag
from typing import Any
from uuid import UUID


class UserPermissions(IntFlag):
    """What a user may do on a course."""

    NONE = 0
    RENAME_COURSE = 1 << 0
    EDIT_LAYOUT = 1 << 1
    GRANT_ROLES = 1 << 2
    VIEW_COURSE = 1 << 3
    UNDO_REDO = 1 << 4
    DELETE_COURSE = 1 << 5
    DROP_MARKS = 1 << 6
    SET_FINISH_FLAG = 1 << 7


class UserRoles(IntFlag):
    """A user's relationship to a course; a user may hold several roles.

    OWNER: bought the course, invites others and grants roles
    PRO: principal race officer, controls layout, size and direction
    MARK_BOAT: sets and pulls marks
    FINISH_BOAT: controls the finish line
    OBSERVER: can see the map but not change it
    """

    NONE = 0
    OWNER = 1 << 0
    PRO = 1 << 1
    MARK_BOAT = 1 << 2
    FINISH_BOAT = 1 << 3
    OBSERVER = 1 << 4

    @property
    def permissions(self) -> UserPermissions:
        """Union of the permissions granted by every role held."""
        perms = UserPermissions.NONE
        for role, granted in _ROLE_PERMISSIONS.items():
            if role in self:
                perms |= granted
        return perms


_ROLE_PERMISSIONS: dict[UserRoles, UserPermissions] = {
    UserRoles.OWNER: (
        UserPermissions.RENAME_COURSE
        | UserPermissions.GRANT_ROLES
        | UserPermissions.VIEW_COURSE
        | UserPermissions.DELETE_COURSE
    ),
    UserRoles.PRO: UserPermissions.EDIT_LAYOUT | UserPermissions.VIEW_COURSE | UserPermissions.UNDO_REDO,
    UserRoles.MARK_BOAT: UserPermissions.VIEW_COURSE | UserPermissions.DROP_MARKS,
    UserRoles.FINISH_BOAT: UserPermissions.VIEW_COURSE | UserPermissions.SET_FINISH_FLAG,
    UserRoles.OBSERVER: UserPermissions.VIEW_COURSE,
}

# New course creators start with every working role
CREATOR_ROLES = UserRoles.OWNER | UserRoles.PRO | UserRoles.MARK_BOAT | UserRoles.FINISH_BOAT


@dataclass
class CourseUser:
    """Someone with access to a course and their committee roles."""

    id: UUID
    name: str
    roles: UserRoles = UserRoles.OBSERVER

    @property
    def permissions(self) -> UserPermissions:
        return self.roles.permissions

    def can(self, permission: UserPermissions) -> bool:
        return permission in self.permissions

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id), "name": self.name, "roles": int(self.roles)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CourseUser":
        return cls(id=UUID(data["id"]), name=data["name"], roles=UserRoles(int(data["roles"])))
