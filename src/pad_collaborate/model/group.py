"""Define the model of the groups of users and pads."""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator  # noqa: E0611

from ..exceptions import NotFoundError, PadCollaborateError, ReferentialIntegrityError
from .common import (
    GROUP_PREFIX,
    PAD_PREFIX,
    USER_PREFIX,
    build,
    exists_all,
    get_or_delete,
    new_id,
    string_items,
    validate_required_fields,
)
from .user import Login

if TYPE_CHECKING:
    from ..adapters import KeyStore

log = logging.getLogger(__name__)


class Visibility(str, Enum):
    """Define who can see a pad."""

    RESTRICTED = "restricted"
    PRIVATE = "private"
    PUBLIC = "public"

    @classmethod
    def parse(cls, value: Any) -> Optional["Visibility"]:
        """Return the visibility that matches value, None if there is none."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class GroupAttributes(BaseModel):
    """Model the attributes of a group that users can set."""

    name: str
    admins: List[Login] = Field(min_length=1)
    users: List[Login] = Field(default_factory=list)
    visibility: Visibility = Visibility.RESTRICTED
    password: Optional[str] = None
    readonly: bool = False

    @model_validator(mode="after")
    def check_password(self) -> "GroupAttributes":
        """Ensure that private groups have a password."""
        if self.visibility == Visibility.PRIVATE and not self.password:
            raise ValueError("A private group needs a password.")
        return self

    @property
    def members(self) -> List[str]:
        """Return the logins of the admins and the users of the group."""
        return self.admins + [login for login in self.users if login not in self.admins]


class Group(GroupAttributes):
    """Model a group of users that owns pads.

    `pads` is the secondary index of the pads of the group. Only the pad model
    changes it.
    """

    id_: str
    pads: List[str] = Field(default_factory=list)

    def add_users(self, logins: List[str]) -> bool:
        """Add a list of users to the group.

        Returns:
            If there was any user added.
        """
        changed = False

        for login in logins:
            if login not in self.members:
                log.info(f"Adding user {login} to group {self.name}")
                self.users.append(login)
                changed = True

        return changed

    def remove_users(self, logins: List[str]) -> bool:
        """Remove a list of users from the group.

        Admins are not removed.

        Returns:
            If there was any user removed.
        """
        changed = False
        for login in logins:
            if login in self.admins:
                log.warning(f"User {login} is an admin of group {self.name}, not removing")
            elif login in self.users:
                log.info(f"Removing user {login} from group {self.name}")
                self.users.remove(login)
                changed = True
            else:
                log.info(f"User {login} is not part of the {self.name} group")

        return changed


def assign_defaults(params: Dict[str, Any]) -> GroupAttributes:
    """Build the group attributes from params, assigning defaults if needed.

    * `admins` and `users` keep only their string entries, without duplicates.
        Admins are not repeated in `users`.
    * `visibility` is *restricted* unless a valid one is given.
    * `password` is None unless a string is given.
    * `readonly` is False unless a boolean is given.

    Raises:
        ValidationError: if the resulting attributes are not valid.
    """
    admins = string_items(params.get("admins"), unique=True)
    users = [
        login
        for login in string_items(params.get("users"), unique=True)
        if login not in admins
    ]
    password = params.get("password")
    readonly = params.get("readonly")
    return build(
        GroupAttributes,
        name=params.get("name"),
        admins=admins,
        users=users,
        visibility=Visibility.parse(params.get("visibility")) or Visibility.RESTRICTED,
        password=password if isinstance(password, str) else None,
        readonly=readonly if isinstance(readonly, bool) else False,
    )


class GroupModel:
    """Define the operations on the group records.

    Each group write is followed by the update of the `groups` index of its
    members. If the index update fails the group record is restored.
    """

    def __init__(self, store: "KeyStore") -> None:
        """Set the store."""
        self.store = store

    def __repr__(self) -> str:
        """Return a string that represents the object."""
        return f"GroupModel(store={self.store!r})"

    def create(self, params: Dict[str, Any]) -> Group:
        """Create a new group.

        Args:
            params: group attributes, `name` and `admins` are required.

        Raises:
            ValidationError: if the params are not valid.
            ReferentialIntegrityError: if any of the members doesn't exist.
        """
        validate_required_fields(params, ["name", "admins"])
        attributes = assign_defaults(params)
        group = Group(id_=new_id(), **attributes.model_dump())

        with self.store.lock(GROUP_PREFIX + group.id_):
            self._check_members(group)
            self._persist(group)
        log.info(f"Created group {group.name} ({group.id_})")
        return group

    def update(self, id_: str, params: Dict[str, Any]) -> Group:
        """Change the attributes of an existent group.

        The pads of the group are kept.

        Raises:
            ValidationError: if the params are not valid.
            NotFoundError: if the group doesn't exist.
            ReferentialIntegrityError: if any of the members doesn't exist.
        """
        validate_required_fields(params, ["name", "admins"])
        attributes = assign_defaults(params)

        with self.store.lock(GROUP_PREFIX + id_):
            previous = self.get(id_)
            group = Group(id_=id_, pads=previous.pads, **attributes.model_dump())
            self._check_members(group)
            self._persist(group, previous)
        log.info(f"Updated group {group.name} ({group.id_})")
        return group

    def get(self, id_: str) -> Group:
        """Return the group with the id.

        Raises:
            NotFoundError: if the group doesn't exist.
        """
        return Group(**get_or_delete(self.store, False, GROUP_PREFIX, id_))

    def delete(self, id_: str) -> Group:
        """Remove a group, its pads and its references from the users.

        Raises:
            NotFoundError: if the group doesn't exist.
        """
        with self.store.lock(GROUP_PREFIX + id_):
            group = Group(**get_or_delete(self.store, True, GROUP_PREFIX, id_))

        for pad_id in group.pads:
            log.debug(f"Deleting pad {pad_id} of group {id_}")
            if self.store.exists(PAD_PREFIX + pad_id):
                self.store.delete(PAD_PREFIX + pad_id)

        for login in group.members:
            self._reindex_user(True, id_, login)

        log.info(f"Deleted group {group.name} ({id_})")
        return group

    def add_users(self, id_: str, logins: List[str]) -> Group:
        """Add users to an existent group.

        Raises:
            NotFoundError: if the group doesn't exist.
            ReferentialIntegrityError: if any of the users doesn't exist.
        """
        with self.store.lock(GROUP_PREFIX + id_):
            group = self.get(id_)
            if not group.add_users(logins):
                return group
            return self.update(id_, group.model_dump(mode="json"))

    def remove_users(self, id_: str, logins: List[str]) -> Group:
        """Remove users from an existent group.

        The admins of the group are kept, and the group is removed from the
        `groups` index of the removed users.

        Raises:
            NotFoundError: if the group doesn't exist.
        """
        with self.store.lock(GROUP_PREFIX + id_):
            group = self.get(id_)
            if not group.remove_users(logins):
                return group
            return self.update(id_, group.model_dump(mode="json"))

    def _check_members(self, group: Group) -> None:
        """Check that all the members of the group exist.

        Raises:
            ReferentialIntegrityError: if any of the members doesn't exist.
        """
        keys = [USER_PREFIX + login for login in group.members]
        if not exists_all(self.store, keys):
            missing = [key for key in keys if not self.store.exists(key)]
            raise ReferentialIntegrityError("some users not found", missing)

    def _persist(self, group: Group, previous: Optional[Group] = None) -> None:
        """Write the group and update the `groups` index of its members.

        If the index update fails the changes are reverted before raising the
        error.
        """
        key = GROUP_PREFIX + group.id_
        old_members = previous.members if previous else []
        changes = [(False, login) for login in group.members if login not in old_members]
        changes += [(True, login) for login in old_members if login not in group.members]

        self.store.set(key, group.model_dump(mode="json"))
        applied = []
        try:
            for remove, login in changes:
                self._reindex_user(remove, group.id_, login)
                applied.append((remove, login))
        except PadCollaborateError:
            log.error(f"Could not index the members of group {group.id_}, reverting")
            self._revert(key, previous, group.id_, applied)
            raise

    def _revert(
        self,
        key: str,
        previous: Optional[Group],
        id_: str,
        applied: List[tuple],
    ) -> None:
        """Undo a partial group write."""
        try:
            for remove, login in reversed(applied):
                self._reindex_user(not remove, id_, login)
            if previous is None:
                self.store.delete(key)
            else:
                self.store.set(key, previous.model_dump(mode="json"))
        except PadCollaborateError as error:
            log.error(f"Could not revert the changes on group {id_}: {error}")

    def _reindex_user(self, remove: bool, id_: str, login: str) -> None:
        """Add or remove a group id from the `groups` index of a user.

        Raises:
            NotFoundError: if the user to add the group to doesn't exist.
        """
        key = USER_PREFIX + login
        with self.store.lock(key):
            try:
                record = self.store.get(key)
            except NotFoundError:
                if remove:
                    log.warning(f"User {login} doesn't exist, nothing to unindex")
                    return
                raise
            groups = record.setdefault("groups", [])
            if remove == (id_ not in groups):
                return
            if remove:
                groups.remove(id_)
            else:
                groups.append(id_)
            log.debug(f"Updating the groups index of user {login}")
            self.store.set(key, record)
