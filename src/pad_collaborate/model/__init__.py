"""Define the data models of the program."""

from .group import Group, GroupModel, Visibility
from .pad import Pad, PadModel
from .user import User, UserModel, UserProfile

__all__ = [
    "Group",
    "GroupModel",
    "Pad",
    "PadModel",
    "User",
    "UserModel",
    "UserProfile",
    "Visibility",
]
