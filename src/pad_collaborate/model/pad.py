"""Define the model of the pads.

A pad belongs to a group and can override the group `visibility`, `password`
and `readonly` attributes. A None value in any of them means that the value of
the group applies. The stored record keeps the None, the group value is only
resolved when the pad is accessed.

The group keeps the list of its pads in its `pads` attribute, this index is
maintained by the pad operations: each pad write is followed by a write of the
group record.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator  # noqa: E0611

from ..exceptions import (
    NotFoundError,
    PadCollaborateError,
    ReferentialIntegrityError,
    ValidationError,
)
from .common import (
    GROUP_PREFIX,
    PAD_PREFIX,
    USER_PREFIX,
    build,
    exists,
    exists_all,
    get_or_delete,
    new_id,
    string_items,
    validate_required_fields,
)
from .group import Group, Visibility

if TYPE_CHECKING:
    from ..adapters import KeyStore

log = logging.getLogger(__name__)


class PadAttributes(BaseModel):
    """Model the attributes of a pad that users can set."""

    name: str
    group: str
    visibility: Optional[Visibility] = None
    users: List[str] = Field(default_factory=list)
    password: Optional[str] = None
    readonly: Optional[bool] = None

    @model_validator(mode="after")
    def check_users(self) -> "PadAttributes":
        """Ensure that only restricted pads have users."""
        if self.users and self.visibility != Visibility.RESTRICTED:
            raise ValueError("Only restricted pads can have users.")
        return self


class Pad(PadAttributes):
    """Model a pad."""

    id_: str

    def inherit(self, group: Group) -> "Pad":
        """Return a copy of the pad with the None attributes taken from the group."""
        return self.model_copy(
            update={
                "visibility": (
                    group.visibility if self.visibility is None else self.visibility
                ),
                "password": group.password if self.password is None else self.password,
                "readonly": group.readonly if self.readonly is None else self.readonly,
            }
        )


def assign_defaults(params: Dict[str, Any]) -> PadAttributes:
    """Build the pad attributes from params, assigning defaults if needed.

    * `users` keeps the string entries of the given list if the visibility is
        *restricted*, it's empty otherwise.
    * `visibility` is one of *restricted*, *private* or *public*, or None.
    * `password` is a string or None.
    * `readonly` is a boolean or None.

    Raises:
        ValidationError: if `name` or `group` are not valid.
    """
    visibility = Visibility.parse(params.get("visibility"))
    password = params.get("password")
    readonly = params.get("readonly")
    if visibility == Visibility.RESTRICTED:
        users = string_items(params.get("users"))
    else:
        users = []

    return build(
        PadAttributes,
        name=params.get("name"),
        group=params.get("group"),
        visibility=visibility,
        users=users,
        password=password if isinstance(password, str) else None,
        readonly=readonly if isinstance(readonly, bool) else None,
    )


class PadModel:
    """Define the operations on the pad records.

    The pad write and the group index write are not done in a transaction. If
    the group index write fails, the pad record is restored to its previous
    state before the error is raised.
    """

    def __init__(self, store: "KeyStore") -> None:
        """Set the store."""
        self.store = store

    def __repr__(self) -> str:
        """Return a string that represents the object."""
        return f"PadModel(store={self.store!r})"

    def create(self, params: Dict[str, Any]) -> Pad:
        """Create a new pad.

        Args:
            params: pad attributes, `name` and `group` are required.

        Raises:
            ValidationError: if the params are not valid.
            NotFoundError: if the group doesn't exist.
            ReferentialIntegrityError: if any of the pad users doesn't exist.
        """
        validate_required_fields(params, ["name", "group"])
        attributes = assign_defaults(params)
        pad = Pad(id_=new_id(), **attributes.model_dump())

        if not exists(self.store, GROUP_PREFIX + pad.group):
            raise NotFoundError(f"group {pad.group} not found", GROUP_PREFIX + pad.group)
        self.validate_referenced_users(pad)
        self.persist(pad)
        log.info(f"Created pad {pad.name} ({pad.id_}) in group {pad.group}")
        return pad

    def update(self, id_: str, params: Dict[str, Any]) -> Pad:
        """Change the attributes of an existent pad.

        Raises:
            ValidationError: if the params are not valid or try to move the pad
                to another group.
            NotFoundError: if the pad doesn't exist.
            ReferentialIntegrityError: if any of the pad users doesn't exist.
        """
        validate_required_fields(params, ["name", "group"])
        attributes = assign_defaults(params)

        with self.store.lock(PAD_PREFIX + id_):
            previous = self.get(id_)
            if attributes.group != previous.group:
                raise ValidationError("The group of a pad can't be changed.", "group")
            pad = Pad(id_=id_, **attributes.model_dump())
            self.validate_referenced_users(pad)
            self.persist(pad, previous)
        log.info(f"Updated pad {pad.name} ({pad.id_})")
        return pad

    def get(self, id_: str) -> Pad:
        """Return the pad with the id.

        Raises:
            NotFoundError: if the pad doesn't exist.
        """
        return Pad(**get_or_delete(self.store, False, PAD_PREFIX, id_))

    def delete(self, id_: str) -> Pad:
        """Remove a pad and its reference from the group.

        Raises:
            NotFoundError: if the pad or its group don't exist.
        """
        with self.store.lock(PAD_PREFIX + id_):
            pad = Pad(**get_or_delete(self.store, True, PAD_PREFIX, id_))
        self.reindex_group(True, pad)
        log.info(f"Deleted pad {pad.name} ({id_})")
        return pad

    def resolve(self, id_: str) -> Pad:
        """Return the pad with the attributes inherited from its group.

        Raises:
            NotFoundError: if the pad or its group don't exist.
        """
        pad = self.get(id_)
        group = Group(**get_or_delete(self.store, False, GROUP_PREFIX, pad.group))
        return pad.inherit(group)

    def validate_referenced_users(self, pad: Pad) -> None:
        """Check that all the users of the pad exist.

        Raises:
            ReferentialIntegrityError: if any of the users doesn't exist.
        """
        if not pad.users:
            return
        keys = [USER_PREFIX + login for login in pad.users]
        if not exists_all(self.store, keys):
            missing = [key for key in keys if not self.store.exists(key)]
            raise ReferentialIntegrityError("some users not found", missing)

    def persist(self, pad: Pad, previous: Optional[Pad] = None) -> Pad:
        """Write the pad and then add it to the `pads` index of its group.

        Args:
            pad: Pad to write.
            previous: State of the pad before the change, None if it's new. It's
                used to revert the pad write if the group index write fails.
        """
        key = PAD_PREFIX + pad.id_
        self.store.set(key, pad.model_dump(mode="json"))
        try:
            self.reindex_group(False, pad)
        except PadCollaborateError:
            log.error(f"Could not index pad {pad.id_} in group {pad.group}, reverting")
            try:
                if previous is None:
                    self.store.delete(key)
                else:
                    self.store.set(key, previous.model_dump(mode="json"))
            except PadCollaborateError as error:
                log.error(f"Could not revert the changes on pad {pad.id_}: {error}")
            raise
        return pad

    def reindex_group(self, remove: bool, pad: Pad) -> None:
        """Add or remove the pad from the `pads` index of its group.

        Adding a pad that is already in the index doesn't write the group.

        Raises:
            NotFoundError: if the group doesn't exist.
        """
        with self.store.lock(GROUP_PREFIX + pad.group):
            record = get_or_delete(self.store, False, GROUP_PREFIX, pad.group)
            pads = record.setdefault("pads", [])
            if remove:
                if pad.id_ in pads:
                    pads.remove(pad.id_)
            elif pad.id_ in pads:
                log.debug(f"Pad {pad.id_} is already indexed in group {pad.group}")
                return
            else:
                pads.append(pad.id_)
            log.debug(f"Updating the pads index of group {pad.group}")
            self.store.set(GROUP_PREFIX + pad.group, record)
