"""Define the helpers shared by the models of the records."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Sequence, Type, TypeVar
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import NotFoundError, ValidationError

if TYPE_CHECKING:
    from ..adapters import KeyStore, Record

USER_PREFIX = "user:"
GROUP_PREFIX = "group:"
PAD_PREFIX = "pad:"

ModelT = TypeVar("ModelT", bound=BaseModel)

log = logging.getLogger(__name__)


def new_id() -> str:
    """Return a new unique identifier for a record."""
    return uuid4().hex


def exists(store: "KeyStore", key: str) -> bool:
    """Check if the store has a record under key."""
    return store.exists(key)


def exists_all(store: "KeyStore", keys: Sequence[str]) -> bool:
    """Check if the store has a record for each of the keys.

    All the keys are checked, even if one of the first ones is missing.
    """
    results = [store.exists(key) for key in keys]
    return all(results)


def get_or_delete(
    store: "KeyStore", remove: bool, prefix: str, id_: str
) -> "Record":
    """Return the record stored under prefix + id_, deleting it if asked to.

    Args:
        store: Key store to use.
        remove: Whether to delete the record after fetching it.
        prefix: Prefix of the entity keys.
        id_: Identifier of the entity.

    Returns:
        The record as it was before the deletion.

    Raises:
        NotFoundError: if there is no record under the key.
    """
    key = prefix + id_
    try:
        record = store.get(key)
    except NotFoundError as error:
        raise NotFoundError(f"{prefix.rstrip(':')} {id_} not found", key) from error

    if remove:
        log.debug(f"Deleting record {key}")
        store.delete(key)
    return record


def validate_required_fields(params: Dict[str, Any], required: Iterable[str]) -> None:
    """Check that the required fields are present in params.

    A field is missing if it's absent, None, a blank string or an empty
    collection.

    Raises:
        ValidationError: naming the first missing field.
    """
    for field in required:
        value = params.get(field)
        if value is None:
            missing = True
        elif isinstance(value, str):
            missing = not value.strip()
        elif isinstance(value, (list, tuple, set, dict)):
            missing = len(value) == 0
        else:
            missing = False

        if missing:
            raise ValidationError(f"{field} is required", field)


def string_items(value: Any, unique: bool = False) -> List[str]:
    """Return the string elements of value if it's a list, an empty list otherwise.

    Args:
        value: Object to filter.
        unique: Remove the duplicated elements keeping the first occurrence.
    """
    if not isinstance(value, (list, tuple)):
        return []
    items: List[str] = []
    for item in value:
        if isinstance(item, str) and not (unique and item in items):
            items.append(item)
    return items


def build(model: Type[ModelT], **data: Any) -> ModelT:
    """Build a pydantic model translating its validation errors.

    Raises:
        ValidationError: naming the first field that failed the validation.
    """
    try:
        return model(**data)
    except PydanticValidationError as error:
        details = error.errors()
        field = str(details[0]["loc"][0]) if details and details[0]["loc"] else None
        message = details[0]["msg"] if details else str(error)
        raise ValidationError(f"{field or model.__name__}: {message}", field) from error
