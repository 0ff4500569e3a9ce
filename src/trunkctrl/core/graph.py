"""Explicit dependency graph for the application's long-lived components.

Each component is declared as a node with a factory and the names of the
nodes it is constructed from. ``build()`` constructs every node exactly
once in topological order, ties broken by declaration order, so no factory
ever receives a component that does not exist yet.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class CompositionError(RuntimeError):
    """The component graph is malformed or was used out of order."""


@dataclass(frozen=True, slots=True)
class ComponentNode:
    """A declared component.

    Attributes:
        name: Unique node name.
        factory: Called with the instances named in ``depends_on``, in order.
        depends_on: Nodes passed to the factory.
        after: Nodes that must be constructed first but are not passed.
    """

    name: str
    factory: Callable[..., object]
    depends_on: tuple[str, ...] = ()
    after: tuple[str, ...] = ()

    @property
    def prerequisites(self) -> tuple[str, ...]:
        """Return every node that must exist before this one."""
        return self.depends_on + self.after


class ComponentGraph:
    """Declare, order and construct components.

    Example:
        graph = ComponentGraph()
        graph.declare("channel_model", ChannelModel)
        graph.declare("selection", ChannelSelectionManager, depends_on=("channel_model",))
        graph.build()
        selection = graph.get("selection")
    """

    def __init__(self) -> None:
        """Initialize an empty graph."""
        self._nodes: dict[str, ComponentNode] = {}
        self._instances: dict[str, object] = {}
        self._sequence: dict[str, int] = {}
        self._built = False

    def declare(
        self,
        name: str,
        factory: Callable[..., object],
        depends_on: tuple[str, ...] = (),
        after: tuple[str, ...] = (),
    ) -> None:
        """Declare a component node.

        Raises:
            CompositionError: If the name is taken or the graph was built.
        """
        if self._built:
            raise CompositionError(f"Cannot declare {name!r}: graph already built")
        if name in self._nodes:
            raise CompositionError(f"Component {name!r} declared twice")
        self._nodes[name] = ComponentNode(name, factory, tuple(depends_on), tuple(after))

    def resolve_order(self) -> list[str]:
        """Return the construction order.

        Raises:
            CompositionError: On unknown dependencies or cycles.
        """
        for node in self._nodes.values():
            for dep in node.prerequisites:
                if dep not in self._nodes:
                    raise CompositionError(f"Component {node.name!r} depends on unknown {dep!r}")
                if dep == node.name:
                    raise CompositionError(f"Component {node.name!r} depends on itself")

        order: list[str] = []
        placed: set[str] = set()
        pending = list(self._nodes.values())
        while pending:
            # Earliest declared node whose prerequisites are all placed
            ready = next(
                (n for n in pending if all(dep in placed for dep in n.prerequisites)), None
            )
            if ready is None:
                names = ", ".join(n.name for n in pending)
                raise CompositionError(f"Dependency cycle among components: {names}")
            pending.remove(ready)
            placed.add(ready.name)
            order.append(ready.name)
        return order

    def build(self) -> dict[str, object]:
        """Construct every component in dependency order.

        Factory exceptions propagate unchanged; the graph is then unusable.

        Returns:
            Mapping of node name to instance, in construction order.

        Raises:
            CompositionError: If the graph is malformed or already built.
        """
        if self._built:
            raise CompositionError("Component graph already built")

        for name in self.resolve_order():
            node = self._nodes[name]
            args = [self.get(dep) for dep in node.depends_on]
            logger.debug("Constructing %s", name)
            self._instances[name] = node.factory(*args)
            self._sequence[name] = len(self._sequence)

        self._built = True
        logger.info("Constructed %d components", len(self._instances))
        return dict(self._instances)

    def get(self, name: str) -> object:
        """Return a constructed component.

        Raises:
            CompositionError: If the component does not exist yet.
        """
        try:
            return self._instances[name]
        except KeyError:
            raise CompositionError(f"Component {name!r} has not been constructed") from None

    def sequence(self, name: str) -> int:
        """Return the zero-based construction position of a component."""
        self.get(name)
        return self._sequence[name]

    def node(self, name: str) -> ComponentNode:
        """Return the declaration of a component."""
        try:
            return self._nodes[name]
        except KeyError:
            raise CompositionError(f"Unknown component {name!r}") from None

    @property
    def is_built(self) -> bool:
        """Return True once ``build()`` has completed."""
        return self._built

    @property
    def construction_order(self) -> list[str]:
        """Return the names of constructed components, in order."""
        return list(self._instances)

    def __contains__(self, name: object) -> bool:
        return name in self._instances

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)
