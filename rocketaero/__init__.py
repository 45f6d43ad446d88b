"""Rocketaero - Aerodynamic coefficient bookkeeping for rocket assemblies.

This package holds the aerodynamic coefficients computed for each part of a
rocket, resolves user drag overrides when they are read, and combines the
parts bottom-up into a whole-rocket total for the flight simulation.

Example:
    >>> from rocketaero import AerodynamicForces, Rocket, RocketComponent, aggregate
    >>>
    >>> rocket = Rocket()
    >>> body = RocketComponent("Body tube")
    >>> rocket.add_child(body)
    >>>
    >>> body_forces = AerodynamicForces(body).zero()
    >>> body_forces.friction_CD = 0.25
    >>> result = aggregate(rocket, {body: body_forces})
    >>> print(f"CD: {result.total.CD:.2f}")
    CD: 0.25
"""

__version__ = "0.1.0"

from rocketaero.aerodynamics import (
    AerodynamicForces,
    AggregationConfig,
    AggregationResult,
    accumulate_drag,
    aggregate,
    forces_table,
    merge,
)
from rocketaero.components import (
    OverridePolicy,
    Rocket,
    RocketComponent,
)
from rocketaero.coordinate import (
    EPSILON,
    NUL,
    Coordinate,
)

__all__ = [
    # Geometry
    "EPSILON",
    "NUL",
    "Coordinate",
    # Components
    "OverridePolicy",
    "Rocket",
    "RocketComponent",
    # Aerodynamics
    "AerodynamicForces",
    "AggregationConfig",
    "AggregationResult",
    "accumulate_drag",
    "aggregate",
    "forces_table",
    "merge",
]
