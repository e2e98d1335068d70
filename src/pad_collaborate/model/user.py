"""Define the model of the users and their credentials."""

import logging
from typing import TYPE_CHECKING, Annotated, Any, Dict, List, Optional

import bcrypt
from pydantic import BaseModel, EmailStr, Field  # noqa: E0611

from ..exceptions import ReferentialIntegrityError, ValidationError
from .common import (
    USER_PREFIX,
    build,
    get_or_delete,
    new_id,
    validate_required_fields,
)

if TYPE_CHECKING:
    from ..adapters import KeyStore

Login = Annotated[str, Field(pattern=r"^[0-9a-zA-Z_.@-]+$")]
BCRYPT_MAX_BYTES = 72

log = logging.getLogger(__name__)


class Password(BaseModel):
    """Model the salted hash of a user password."""

    salt: str
    hash: str


class UserProfile(BaseModel):
    """Model the public information of a user.

    `groups` is the secondary index of the groups where the user is an admin or a
    member. Only the group model changes it.
    """

    id_: str
    login: Login
    email: Optional[EmailStr] = None
    firstname: str = ""
    lastname: str = ""
    groups: List[str] = Field(default_factory=list)


class User(UserProfile):
    """Model a user with its credentials."""

    password: Password

    @property
    def profile(self) -> UserProfile:
        """Return the user information without the credentials."""
        return UserProfile(**self.model_dump(exclude={"password"}))


class UserModel:
    """Define the operations on the user records.

    Users are stored under the `user:` prefix followed by their login.

    Args:
        store: Key store that holds the records.
        bcrypt_rounds: Work factor of the password hashing.
        password_min: Minimum length of the passwords in bytes.
        password_max: Maximum length of the passwords in bytes, bcrypt
            doesn't hash more than 72.
    """

    def __init__(
        self,
        store: "KeyStore",
        bcrypt_rounds: int = 12,
        password_min: int = 8,
        password_max: int = 72,
    ) -> None:
        """Set the store and the password policy."""
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds
        self.password_min = password_min
        self.password_max = min(password_max, BCRYPT_MAX_BYTES)

    def __repr__(self) -> str:
        """Return a string that represents the object."""
        return f"UserModel(store={self.store!r})"

    @staticmethod
    def hash_password(salt: str, password: str) -> str:
        """Return the hash of the password keyed with the salt.

        The same salt and password always return the same hash.
        """
        return bcrypt.hashpw(password.encode("utf-8"), salt.encode("utf-8")).decode(
            "utf-8"
        )

    def _credentials(self, password: Any) -> Password:
        """Return the salted hash of a new password.

        Raises:
            ValidationError: if the password doesn't follow the password policy.
        """
        if not isinstance(password, str):
            raise ValidationError("password must be a string", "password")
        length = len(password.encode("utf-8"))
        if not self.password_min <= length <= self.password_max:
            raise ValidationError(
                f"password length must be between {self.password_min} "
                f"and {self.password_max} bytes",
                "password",
            )
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds).decode("utf-8")
        return Password(salt=salt, hash=self.hash_password(salt, password))

    def create(self, params: Dict[str, Any]) -> User:
        """Create a new user.

        Args:
            params: user attributes, `login` and `password` are required,
                `email`, `firstname` and `lastname` are optional.

        Raises:
            ValidationError: if the params are not valid or the login is taken.
        """
        validate_required_fields(params, ["login", "password"])
        user = build(
            User,
            id_=new_id(),
            login=params["login"],
            email=params.get("email"),
            firstname=params.get("firstname") or "",
            lastname=params.get("lastname") or "",
            password=self._credentials(params["password"]),
        )

        key = USER_PREFIX + user.login
        with self.store.lock(key):
            if self.store.exists(key):
                raise ValidationError(
                    f"The login {user.login} already exists.", "login"
                )
            self.store.set(key, user.model_dump(mode="json"))
        log.info(f"Created user {user.login}")
        return user

    def update(self, login: str, params: Dict[str, Any]) -> User:
        """Change the attributes of an existent user.

        The login and the groups index can't be changed. If a password is given
        it's hashed with a new salt.

        Raises:
            NotFoundError: if the user doesn't exist.
            ValidationError: if the params are not valid.
        """
        if params.get("login", login) != login:
            raise ValidationError("The login of a user can't be changed.", "login")

        key = USER_PREFIX + login
        with self.store.lock(key):
            user = self.get(login)
            changes: Dict[str, Any] = {
                field: params[field]
                for field in ("email", "firstname", "lastname")
                if field in params
            }
            if params.get("password") is not None:
                changes["password"] = self._credentials(params["password"])
            data = user.model_dump()
            data.update(changes)
            user = build(User, **data)
            self.store.set(key, user.model_dump(mode="json"))
        log.info(f"Updated user {login}")
        return user

    def get(self, login: str) -> User:
        """Return the user with the login.

        Raises:
            NotFoundError: if the user doesn't exist.
        """
        return User(**get_or_delete(self.store, False, USER_PREFIX, login))

    def delete(self, login: str) -> User:
        """Remove a user that is not referenced by any group.

        Raises:
            NotFoundError: if the user doesn't exist.
            ReferentialIntegrityError: if a group references the user.
        """
        key = USER_PREFIX + login
        with self.store.lock(key):
            user = self.get(login)
            if user.groups:
                raise ReferentialIntegrityError(
                    f"The user {login} is still part of the groups "
                    f"{', '.join(user.groups)}.",
                    user.groups,
                )
            get_or_delete(self.store, True, USER_PREFIX, login)
        log.info(f"Deleted user {login}")
        return user
