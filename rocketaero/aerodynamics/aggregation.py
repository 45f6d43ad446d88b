"""Bottom-up aggregation of per-component aerodynamic records.

The analysis pass produces one ``AerodynamicForces`` per component. This
module folds them into assembly records and a whole-rocket total:

- ``merge`` combines one child into an accumulator (CP average and the
  additive normal/side/roll coefficients).
- ``accumulate_drag`` sums the override-resolved drag contributions of the
  per-component records. Drag is never combined by ``merge`` because an
  override on an assembly replaces its parts' drag instead of adding to it.
- ``aggregate`` runs both over a component tree in a single post-order pass.

Example:
    >>> from rocketaero.aerodynamics import AerodynamicForces, aggregate
    >>> from rocketaero.components import Rocket, RocketComponent
    >>>
    >>> rocket = Rocket()
    >>> nose = RocketComponent("Nose cone")
    >>> rocket.add_child(nose)
    >>>
    >>> nose_forces = AerodynamicForces(nose).zero()
    >>> nose_forces.CNa = 2.0
    >>> nose_forces.friction_CD = 0.1
    >>>
    >>> result = aggregate(rocket, {nose: nose_forces})
    >>> result.total.CNa, result.total.CD
    (2.0, 0.1)
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import polars as pl
from beartype import beartype

from rocketaero.aerodynamics.forces import COEFFICIENTS, DRAG_COMPONENTS, AerodynamicForces
from rocketaero.components import RocketComponent

logger = logging.getLogger(__name__)

# Drag terms summed into the total, in addition order
DRAG_TERMS = (*DRAG_COMPONENTS, "override_CD")

# =============================================================================
# Configuration
# =============================================================================


@beartype
@dataclass(frozen=True)
class AggregationConfig:
    """Options for ``aggregate``.

    Attributes:
        include_drag: Sum drag contributions into the total record
        require_all: Raise if a leaf component has no record instead of
            skipping it; assemblies and the rocket may lack their own record
    """
    include_drag: bool = True
    require_all: bool = False


@beartype
@dataclass
class AggregationResult:
    """Output of ``aggregate``.

    Attributes:
        total: Whole-rocket record, bound to the rocket
        assemblies: Per-component records covering each component's subtree
    """
    total: AerodynamicForces
    assemblies: dict[RocketComponent, AerodynamicForces] = field(default_factory=dict)

    def snapshot(self) -> "AggregationResult":
        """Clone every record so the result can be read elsewhere while the
        originals keep being mutated."""
        return AggregationResult(
            total=self.total.clone(),
            assemblies={c: f.clone() for c, f in self.assemblies.items()},
        )


# =============================================================================
# Merging
# =============================================================================


@beartype
def merge(accumulator: AerodynamicForces, child: AerodynamicForces) -> AerodynamicForces:
    """Merge ``child`` into ``accumulator`` in place.

    Args:
        accumulator: Record to fold into; must have a computed CP
        child: Record to fold in

    Returns:
        The accumulator

    Raises:
        ValueError: If the accumulator CP is not computed
    """
    logger.debug("Merging %s into %s", child.component, accumulator.component)
    return accumulator.merge(child)


def _override_contribution(record: AerodynamicForces) -> float | None:
    component = record.component
    if (
        component is not None
        and not component.is_rocket
        and component.cd_overridden
        and not component.cd_overridden_by_ancestor
    ):
        return float(component.override_cd)
    return record.override_CD


@beartype
def accumulate_drag(
    total: AerodynamicForces,
    records: Iterable[AerodynamicForces],
) -> AerodynamicForces:
    """Sum the override-resolved drag of ``records`` into ``total``.

    Friction, pressure, base and override drag are summed separately and
    ``total.CD`` is set to their sum. A component overriding its own drag
    contributes its current ``override_cd``. Records bound to the rocket
    itself are skipped, since ``total`` already stands for the rocket.
    Values that were never computed are skipped.

    Returns:
        The total record
    """
    sums = dict.fromkeys(DRAG_TERMS, 0.0)
    for record in records:
        if record.component is not None and record.component.is_rocket:
            logger.debug("Skipping rocket record %r in drag summation", record)
            continue
        for name in DRAG_TERMS:
            if name == "override_CD":
                value = _override_contribution(record)
            else:
                value = getattr(record, name)
            if value is None:
                logger.debug("Skipping uncomputed %s of %s", name, record.component)
                continue
            sums[name] += value

    total.friction_CD = sums["friction_CD"]
    total.pressure_CD = sums["pressure_CD"]
    total.base_CD = sums["base_CD"]
    total.override_CD = sums["override_CD"]
    total.CD = sum(sums[name] for name in DRAG_TERMS)
    return total


@beartype
def aggregate(
    rocket: RocketComponent,
    records: Mapping[RocketComponent, AerodynamicForces],
    config: AggregationConfig | None = None,
) -> AggregationResult:
    """Aggregate per-component records over the tree rooted at ``rocket``.

    Components are visited children first. Each gets a zeroed accumulator
    into which its own record and then its children's finished accumulators
    are merged, so every component is merged exactly once at its own level.

    Args:
        rocket: Root of the component tree
        records: Per-component records from the analysis pass
        config: Aggregation options

    Returns:
        AggregationResult with the total and per-component assemblies

    Raises:
        KeyError: If ``config.require_all`` and a leaf component has no record
    """
    config = config or AggregationConfig()
    assemblies: dict[RocketComponent, AerodynamicForces] = {}

    for component in rocket.walk_postorder():
        accumulator = AerodynamicForces(component).zero()

        own = records.get(component)
        if own is not None:
            accumulator.merge(own)
            if not own.axisymmetric:
                accumulator.axisymmetric = False
        elif config.require_all and not component.children and not component.is_rocket:
            raise KeyError(f"No aerodynamic record for component '{component}'")
        else:
            logger.debug("No record for %s, treating it as empty", component)

        for child in component.children:
            assembly = assemblies[child]
            merge(accumulator, assembly)
            if not assembly.axisymmetric:
                accumulator.axisymmetric = False

        assemblies[component] = accumulator

    total = assemblies[rocket]
    if config.include_drag:
        accumulate_drag(total, (records[c] for c in rocket.walk() if c in records))

    logger.debug("Aggregated %d components under %s", len(assemblies), rocket)
    return AggregationResult(total=total, assemblies=assemblies)


# =============================================================================
# Tabular Export
# =============================================================================


@beartype
def forces_table(records: Iterable[AerodynamicForces]) -> pl.DataFrame:
    """Tabulate records, one row each, with override-resolved drag.

    Uncomputed values become nulls.

    Returns:
        Polars DataFrame with component name, CP, coefficients and mod_id
    """
    schema: dict[str, pl.DataType] = {
        "component": pl.Utf8,
        "cp_x": pl.Float64,
        "cp_y": pl.Float64,
        "cp_z": pl.Float64,
        "cp_weight": pl.Float64,
        **{name: pl.Float64 for name in COEFFICIENTS},
        "axisymmetric": pl.Boolean,
        "mod_id": pl.Int64,
    }
    columns: dict[str, list] = {name: [] for name in schema}

    for record in records:
        data = record.to_dict()
        cp = data.pop("cp")
        columns["cp_x"].append(None if cp is None else cp.x)
        columns["cp_y"].append(None if cp is None else cp.y)
        columns["cp_z"].append(None if cp is None else cp.z)
        columns["cp_weight"].append(None if cp is None else cp.weight)
        for name, value in data.items():
            columns[name].append(value)

    return pl.DataFrame(columns, schema=schema)
