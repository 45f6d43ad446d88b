"""Aerodynamic coefficient records and their aggregation.

Provides the per-component coefficient record and the bottom-up pass that
combines records over a rocket component tree.

Example:
    >>> from rocketaero.aerodynamics import AerodynamicForces, merge
    >>>
    >>> total = AerodynamicForces().zero()
    >>> for part in part_forces:
    ...     merge(total, part)
"""

from rocketaero.aerodynamics.aggregation import (
    AggregationConfig,
    AggregationResult,
    accumulate_drag,
    aggregate,
    forces_table,
    merge,
)
from rocketaero.aerodynamics.forces import (
    ADDITIVE_COEFFICIENTS,
    COEFFICIENTS,
    AerodynamicForces,
)

__all__ = [
    # Records
    "ADDITIVE_COEFFICIENTS",
    "COEFFICIENTS",
    "AerodynamicForces",
    # Aggregation
    "AggregationConfig",
    "AggregationResult",
    "accumulate_drag",
    "aggregate",
    "forces_table",
    "merge",
]
