"""Define all the orchestration functionality required by the program to work.

Classes and functions that connect the different domain model objects with the adapters
and handlers to achieve the program's purpose.
"""

import hmac
import logging
from typing import TYPE_CHECKING, List

from .exceptions import AuthenticationError, NotFoundError, ReferentialIntegrityError
from .model.common import USER_PREFIX, exists_all

if TYPE_CHECKING:
    from .model.group import Group, GroupModel
    from .model.pad import PadModel
    from .model.user import UserModel, UserProfile
    from .tokens import TokenIssuer

log = logging.getLogger(__name__)


def verify_credentials(users: "UserModel", login: str, password: str) -> "UserProfile":
    """Check that the password matches the one of the user.

    Args:
        users: Model of the user records.
        login: Login of the user.
        password: Password to check.

    Returns:
        The user information without the credentials.

    Raises:
        NotFoundError: if the user doesn't exist.
        AuthenticationError: if the password doesn't match.
    """
    user = users.get(login)
    if (
        not isinstance(password, str)
        or len(password.encode("utf-8")) > users.password_max
    ):
        log.info(f"Failed authentication of user {login}")
        raise AuthenticationError("password is not correct")
    hashed = users.hash_password(user.password.salt, password)

    if not hmac.compare_digest(hashed.encode("utf-8"), user.password.hash.encode("utf-8")):
        log.info(f"Failed authentication of user {login}")
        raise AuthenticationError("password is not correct")

    log.debug(f"User {login} authenticated")
    return user.profile


def check_pad_password(pads: "PadModel", pad_id: str, password: str) -> bool:
    """Check a password against the one of a pad.

    If the pad doesn't define a password the one of its group is used. Pads
    without a password accept any.

    Raises:
        NotFoundError: if the pad or its group don't exist.
    """
    pad = pads.resolve(pad_id)
    if pad.password is None:
        return True
    return hmac.compare_digest(pad.password.encode("utf-8"), password.encode("utf-8"))


def invite_users(
    groups: "GroupModel", tokens: "TokenIssuer", group_id: str, logins: List[str]
) -> str:
    """Create an invitation token to join a group.

    Args:
        groups: Model of the group records.
        tokens: Issuer of the invitation tokens.
        group_id: Group to join.
        logins: Users to invite.

    Returns:
        The invitation token.

    Raises:
        NotFoundError: if the group doesn't exist.
        ReferentialIntegrityError: if any of the users doesn't exist.
    """
    group = groups.get(group_id)
    keys = [USER_PREFIX + login for login in logins]
    if not exists_all(groups.store, keys):
        missing = [key for key in keys if not groups.store.exists(key)]
        raise ReferentialIntegrityError("some users not found", missing)

    log.info(f"Inviting {', '.join(logins)} to group {group.name}")
    return tokens.issue({"group": group.id_, "logins": list(logins)})


def accept_invitation(
    groups: "GroupModel", tokens: "TokenIssuer", token: str
) -> "Group":
    """Add the invited users to the group of the invitation.

    The token is consumed, it can't be accepted twice.

    Raises:
        NotFoundError: if the token is unknown or has expired, or the group
            doesn't exist anymore.
    """
    try:
        invitation = tokens.pop(token)
    except NotFoundError as error:
        raise NotFoundError("The invitation is not valid or has expired.") from error

    return groups.add_users(invitation["group"], invitation["logins"])
