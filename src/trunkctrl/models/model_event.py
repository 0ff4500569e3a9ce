"""Change notification shared by the simple list models."""

from dataclasses import dataclass
from enum import Enum


class ModelEventKind(Enum):
    """What happened to a model item."""

    ADD = "add"
    CHANGE = "change"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class ModelEvent:
    """An item was added to, changed in, or removed from a model.

    Attributes:
        model: Name of the model that changed.
        kind: Kind of change.
        item: The affected item.
    """

    model: str
    kind: ModelEventKind
    item: object
