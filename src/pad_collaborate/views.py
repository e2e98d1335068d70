"""Define the views of the program."""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel  # noqa: E0611
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

if TYPE_CHECKING:
    from .model.group import Group
    from .model.pad import Pad


def _format(value: Any) -> str:
    """Return the printable representation of an attribute value."""
    if isinstance(value, (list, tuple)):
        return "- " + "\n- ".join(str(element) for element in value) if value else ""
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def print_model(model: BaseModel) -> None:
    """Print the attributes of a model.

    Args:
        model: A pydantic model.
    """
    table = Table(box=None, show_header=False)
    table.add_column("Type", justify="center", style="green", no_wrap=True)
    table.add_column("Value")
    for attribute, value in model:
        if value is None or value == [] or value == "":
            continue
        table.add_row(attribute.rstrip("_").capitalize(), _format(value))

    Console().print(table)


def print_group(group: "Group") -> None:
    """Print the information of a group.

    Args:
        group: Group to print
    """
    tree = Tree(
        Text.assemble(
            (group.name, "magenta"),
            " (",
            group.id_,
            ") ",
            (group.visibility.value, "green"),
            " readonly" if group.readonly else "",
        )
    )

    for label, elements in [
        ("Admins", group.admins),
        ("Users", group.users),
        ("Pads", group.pads),
    ]:
        branch = tree.add(label)
        for element in elements:
            branch.add(element)

    Console().print(tree)


def print_pad(pad: "Pad") -> None:
    """Print the information of a pad, hiding its password.

    Args:
        pad: Pad to print
    """
    print_model(pad.model_copy(update={"password": "***" if pad.password else None}))
