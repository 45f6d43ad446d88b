"""Rocket component tree and drag override policy.

Aerodynamic records never decide on their own whether a drag value is
overridden; they ask the component they are bound to. Anything exposing the
``OverridePolicy`` attributes can be bound, and ``RocketComponent`` is the
tree implementation used by the aggregation pass.

An override on a component covers its subcomponents only when
``override_subcomponents_cd`` is set. The ancestor check is evaluated on
every read, so toggling an override after coefficients were stored is
reflected immediately by the records bound to the affected components.

Example:
    >>> from rocketaero.components import Rocket, RocketComponent
    >>>
    >>> rocket = Rocket()
    >>> stage = RocketComponent("Sustainer")
    >>> fins = RocketComponent("Fin set")
    >>> rocket.add_child(stage)
    >>> stage.add_child(fins)
    >>>
    >>> stage.cd_overridden = True
    >>> stage.override_subcomponents_cd = True
    >>> fins.cd_overridden_by_ancestor
    True
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

import numpy as np
from beartype import beartype

# =============================================================================
# Override Policy Protocol
# =============================================================================


@runtime_checkable
class OverridePolicy(Protocol):
    """Drag override queries an aerodynamic record needs from its component."""

    @property
    def cd_overridden(self) -> bool:
        """Whether drag is explicitly overridden on this component."""
        ...

    @property
    def cd_overridden_by_ancestor(self) -> bool:
        """Whether an ancestor's override covers this component."""
        ...

    @property
    def override_cd(self) -> float:
        """Override drag coefficient of this component."""
        ...

    @property
    def is_rocket(self) -> bool:
        """Whether this is the whole-rocket sentinel."""
        ...


# =============================================================================
# Component Tree
# =============================================================================


@beartype
class RocketComponent:
    """Node of the rocket component tree.

    Attributes:
        name: Display name
        cd_overridden: Whether this component's drag is overridden
        override_subcomponents_cd: Whether the override also covers descendants
    """

    is_rocket = False

    def __init__(
        self,
        name: str,
        *,
        cd_overridden: bool = False,
        override_cd: float | int = 0.0,
        override_subcomponents_cd: bool = False,
    ) -> None:
        self.name = name
        self.cd_overridden = cd_overridden
        self.override_subcomponents_cd = override_subcomponents_cd
        self._override_cd = 0.0
        self.override_cd = override_cd
        self._parent: RocketComponent | None = None
        self._children: list[RocketComponent] = []

    @property
    def override_cd(self) -> float:
        """Override drag coefficient."""
        return self._override_cd

    @override_cd.setter
    def override_cd(self, value: float | int) -> None:
        if not np.isfinite(value):
            raise ValueError(f"Override CD must be finite, got {value}")
        self._override_cd = float(value)

    @property
    def cd_overridden_by_ancestor(self) -> bool:
        """True if some ancestor overrides drag for its whole subtree."""
        return any(
            ancestor.cd_overridden and ancestor.override_subcomponents_cd
            for ancestor in self.ancestors()
        )

    @property
    def parent(self) -> "RocketComponent | None":
        """Parent component, or None at the root."""
        return self._parent

    @property
    def children(self) -> tuple["RocketComponent", ...]:
        return tuple(self._children)

    @property
    def root(self) -> "RocketComponent":
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    def ancestors(self) -> Iterator["RocketComponent"]:
        """Yield the parent, grandparent, ... up to the root."""
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    def add_child(self, child: "RocketComponent") -> None:
        """Attach ``child`` as the last subcomponent.

        Raises:
            ValueError: If the edit would break the tree (rocket as child,
                child already attached, or a cycle).
        """
        if child.is_rocket:
            raise ValueError(f"Cannot add rocket '{child.name}' as a subcomponent")
        if child._parent is not None:
            raise ValueError(
                f"Component '{child.name}' already belongs to '{child._parent.name}'"
            )
        if child is self or any(child is ancestor for ancestor in self.ancestors()):
            raise ValueError(f"Adding '{child.name}' to '{self.name}' would create a cycle")

        self._children.append(child)
        child._parent = self

    def remove_child(self, child: "RocketComponent") -> None:
        """Detach ``child`` from this component."""
        if child._parent is not self:
            raise ValueError(f"'{child.name}' is not a subcomponent of '{self.name}'")
        self._children.remove(child)
        child._parent = None

    def walk(self) -> Iterator["RocketComponent"]:
        """Yield this component and all descendants, parents first."""
        yield self
        for child in self._children:
            yield from child.walk()

    def walk_postorder(self) -> Iterator["RocketComponent"]:
        """Yield all descendants and then this component, children first."""
        for child in self._children:
            yield from child.walk_postorder()
        yield self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def __str__(self) -> str:
        return self.name


@beartype
class Rocket(RocketComponent):
    """Root of the component tree; its records hold whole-rocket totals."""

    is_rocket = True

    def __init__(self, name: str = "Rocket", **kwargs) -> None:
        super().__init__(name, **kwargs)
