"""Aerodynamic coefficient record.

``AerodynamicForces`` holds the force and moment coefficients of one
component (or of the whole rocket) at one flight condition. A coefficient
that has not been computed is stored as ``None``, which is distinct from a
computed zero.

Drag readers (``CD``, ``pressure_CD``, ``base_CD``, ``friction_CD`` and
``override_CD``) resolve the bound component's override policy on every
read. The stored values are left untouched and are available through
``raw()``.

Every mutation bumps ``mod_id``, so callers can detect a changed record
without comparing its contents.

Example:
    >>> from rocketaero.aerodynamics import AerodynamicForces
    >>> from rocketaero.components import RocketComponent
    >>>
    >>> fins = RocketComponent("Fin set")
    >>> forces = AerodynamicForces(fins)
    >>> forces.CD = 0.12
    >>> fins.cd_overridden = True
    >>> fins.override_cd = 0.2
    >>> forces.CD, forces.raw("CD")
    (0.2, 0.12)
"""

import copy
from collections.abc import Iterator
from typing import Any

import numpy as np
from beartype import beartype

from rocketaero.components import OverridePolicy
from rocketaero.coordinate import NUL, Coordinate, optional_equals

# Coefficient fields, in display order
COEFFICIENTS = (
    "CNa",
    "CN",
    "Cm",
    "Cside",
    "Cyaw",
    "Croll",
    "Croll_damp",
    "Croll_force",
    "CD_axial",
    "CD",
    "pressure_CD",
    "base_CD",
    "friction_CD",
    "override_CD",
    "pitch_damping_moment",
    "yaw_damping_moment",
)

# Coefficients that combine by plain summation when merging
ADDITIVE_COEFFICIENTS = (
    "CNa",
    "CN",
    "Cm",
    "Cside",
    "Cyaw",
    "Croll",
    "Croll_damp",
    "Croll_force",
)

DRAG_COMPONENTS = ("pressure_CD", "base_CD", "friction_CD")


class _Coefficient:
    """Stored coefficient without any override policy."""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        return obj._values[self.name]

    @beartype
    def __set__(self, obj: Any, value: float | int | None) -> None:
        obj._store(self.name, value)


@beartype
class AerodynamicForces:
    """Aerodynamic coefficients of a component at one flight condition.

    Attributes:
        cp: Centre of pressure, weighted by CNa
        CNa: Normal force coefficient derivative [1/rad]
        CN: Normal force coefficient
        Cm: Pitching moment coefficient about the origin
        Cside: Side force coefficient
        Cyaw: Yaw moment coefficient about the origin
        Croll: Roll moment coefficient
        Croll_damp: Roll damping coefficient
        Croll_force: Roll forcing coefficient
        CD_axial: Axial drag coefficient
        CD: Total drag coefficient (override-aware)
        pressure_CD: Fore pressure drag (override-aware)
        base_CD: Base drag (override-aware)
        friction_CD: Skin friction drag (override-aware)
        override_CD: Drag from overrides (override-aware)
        pitch_damping_moment: Pitch damping moment coefficient
        yaw_damping_moment: Yaw damping moment coefficient
        axisymmetric: Whether the body is rotationally symmetric
        component: Bound component, or None
        mod_id: Modification counter
    """

    CNa = _Coefficient()
    CN = _Coefficient()
    Cm = _Coefficient()
    Cside = _Coefficient()
    Cyaw = _Coefficient()
    Croll = _Coefficient()
    Croll_damp = _Coefficient()
    Croll_force = _Coefficient()
    CD_axial = _Coefficient()
    pitch_damping_moment = _Coefficient()
    yaw_damping_moment = _Coefficient()

    def __init__(self, component: OverridePolicy | None = None) -> None:
        self._component = component
        self._cp: Coordinate | None = None
        self._values: dict[str, float | None] = dict.fromkeys(COEFFICIENTS)
        self._axisymmetric = True
        self._mod_id = 0

    def _store(self, name: str, value: float | int | None) -> None:
        if value is not None and np.isnan(value):
            value = None
        self._values[name] = None if value is None else float(value)
        self._mod_id += 1

    def raw(self, name: str) -> float | None:
        """Stored value of a coefficient, ignoring overrides."""
        if name not in self._values:
            raise KeyError(f"Unknown coefficient: {name!r}")
        return self._values[name]

    @property
    def mod_id(self) -> int:
        """Modification counter; grows on every mutation."""
        return self._mod_id

    @property
    def component(self) -> OverridePolicy | None:
        return self._component

    @component.setter
    def component(self, component: OverridePolicy | None) -> None:
        self._component = component
        self._mod_id += 1

    @property
    def cp(self) -> Coordinate | None:
        return self._cp

    @cp.setter
    def cp(self, cp: Coordinate | None) -> None:
        self._cp = cp
        self._mod_id += 1

    @property
    def axisymmetric(self) -> bool:
        return self._axisymmetric

    @axisymmetric.setter
    def axisymmetric(self, value: bool) -> None:
        self._axisymmetric = value
        self._mod_id += 1

    # -------------------------------------------------------------------------
    # Override-aware drag
    # -------------------------------------------------------------------------

    def _drag_component(self, name: str) -> float | None:
        component = self._component
        if component is not None and (
            component.cd_overridden or component.cd_overridden_by_ancestor
        ):
            return 0.0
        return self._values[name]

    @property
    def CD(self) -> float | None:
        component = self._component
        if component is None:
            return self._values["CD"]
        if component.cd_overridden_by_ancestor:
            return 0.0
        if component.cd_overridden:
            return float(component.override_cd)
        return self._values["CD"]

    @CD.setter
    def CD(self, value: float | int | None) -> None:
        self._store("CD", value)

    @property
    def pressure_CD(self) -> float | None:
        return self._drag_component("pressure_CD")

    @pressure_CD.setter
    def pressure_CD(self, value: float | int | None) -> None:
        self._store("pressure_CD", value)

    @property
    def base_CD(self) -> float | None:
        return self._drag_component("base_CD")

    @base_CD.setter
    def base_CD(self, value: float | int | None) -> None:
        self._store("base_CD", value)

    @property
    def friction_CD(self) -> float | None:
        return self._drag_component("friction_CD")

    @friction_CD.setter
    def friction_CD(self, value: float | int | None) -> None:
        self._store("friction_CD", value)

    @property
    def override_CD(self) -> float | None:
        component = self._component
        if component is None or component.is_rocket:
            return self._values["override_CD"]
        if component.cd_overridden and not component.cd_overridden_by_ancestor:
            return self._values["override_CD"]
        return 0.0

    @override_CD.setter
    def override_CD(self, value: float | int | None) -> None:
        self._store("override_CD", value)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Unbind the component and mark every value as not computed."""
        self._component = None
        self._cp = None
        self._values = dict.fromkeys(COEFFICIENTS)
        self._mod_id += 1

    def zero(self) -> "AerodynamicForces":
        """Set every value to a computed zero, keeping the component.

        Used to prepare an accumulator before merging subcomponents into it.
        """
        self._axisymmetric = True
        self._cp = NUL
        self._values = dict.fromkeys(COEFFICIENTS, 0.0)
        self._mod_id += 1
        return self

    def merge(self, other: "AerodynamicForces") -> "AerodynamicForces":
        """Fold ``other`` into this record in place.

        The CP becomes the weighted average of both CPs and the additive
        coefficients are summed. Drag and damping moments are not touched;
        drag depends on the override policy and is summed separately.
        A coefficient missing on either side stays missing.

        Raises:
            ValueError: If this record has no computed CP.
        """
        if self._cp is None:
            raise ValueError(
                f"Cannot merge into {self!r} without a computed CP; zero() it first"
            )

        if other._cp is not None:
            self._cp = self._cp.average(other._cp)
        for name in ADDITIVE_COEFFICIENTS:
            mine = self._values[name]
            theirs = other._values[name]
            self._values[name] = None if mine is None or theirs is None else mine + theirs

        self._mod_id += 1
        return self

    def clone(self) -> "AerodynamicForces":
        """Independent copy sharing the component reference."""
        return copy.copy(self)

    def __copy__(self) -> "AerodynamicForces":
        twin = type(self).__new__(type(self))
        twin.__dict__.update(self.__dict__)
        twin._values = dict(self._values)
        return twin

    # -------------------------------------------------------------------------
    # Comparison and diagnostics
    # -------------------------------------------------------------------------

    def computed_fields(self) -> Iterator[tuple[str, float]]:
        """Yield ``(name, value)`` for every computed coefficient.

        A field counts as computed when its stored value is set; drag values
        are reported override-resolved.
        """
        for name in COEFFICIENTS:
            if self._values[name] is not None:
                yield name, getattr(self, name)

    def to_dict(self, resolved: bool = True) -> dict[str, Any]:
        """Diagnostic mapping of the record.

        Args:
            resolved: Report override-resolved drag values instead of the
                stored ones

        Returns:
            Dict with ``component``, ``cp``, every coefficient,
            ``axisymmetric`` and ``mod_id``
        """
        data: dict[str, Any] = {
            "component": None if self._component is None else str(self._component),
            "cp": self._cp,
        }
        for name in COEFFICIENTS:
            data[name] = getattr(self, name) if resolved else self._values[name]
        data["axisymmetric"] = self._axisymmetric
        data["mod_id"] = self._mod_id
        return data

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, AerodynamicForces):
            return False
        if not all(
            optional_equals(getattr(self, name), getattr(other, name))
            for name in COEFFICIENTS
        ):
            return False
        return self._cp == other._cp

    def __hash__(self) -> int:
        """Coarse bucket over CD, CD_axial, CNa and the CP.

        Equality is tolerant but the bucket truncates, so two equal records
        that straddle a bucket boundary hash differently. Records are also
        mutable. Do not put them in sets or use them as dict keys.
        """
        bucket = sum(v for v in (self.CD, self.CD_axial, self.CNa) if v is not None)
        return int(1000 * bucket) + hash(self._cp)

    def __repr__(self) -> str:
        parts = []
        if self._component is not None:
            parts.append(f"component:{self._component}")
        if self._cp is not None:
            parts.append(f"cp:{self._cp}")
        parts.extend(f"{name}:{value}" for name, value in self.computed_fields())
        return f"AerodynamicForces[{','.join(parts)}]"
