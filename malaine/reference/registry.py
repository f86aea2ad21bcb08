"""
Reference registry: loads all lookup tables from YAML at startup, validates
cross-references, and exposes a read-only query API.

The registry is a module-level singleton; call get_registry() to obtain it.
All tables are loaded and validated once at import time. Nothing writes to
the registry after startup.

Tables
------
yarn_weights.yaml          consumption factor (m of yarn per m2) per weight
project_types.yaml         surface-area formula inputs per estimator project
plausibility_ranges.yaml   soft warning bounds used by the validator
shawl_constructions.yaml   shaping parameters per triangular shawl method
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

import yaml

from malaine.utilities.types import LengthUnit

from .types import (
    ConstructionMethod,
    EstimationMethod,
    GarmentSize,
    PlausibilityRange,
    ProjectDimensions,
    ProjectType,
    ProjectTypeEntry,
    ShawlConstructionEntry,
    YarnWeightEntry,
)

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent / "data"


class ReferenceRegistry:
    """
    Read-only registry of all reference lookup tables.

    All public dict attributes are wrapped in MappingProxyType after loading
    and are immutable for the lifetime of the registry instance.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        # Type annotations only; actual assignment happens in _load_*
        self.yarn_weights: MappingProxyType[str, YarnWeightEntry]
        self.default_consumption_m_per_m2: float
        self.project_types: MappingProxyType[ProjectType, ProjectTypeEntry]
        self.ranges: MappingProxyType[str, PlausibilityRange]
        self.shawl_constructions: MappingProxyType[ConstructionMethod, ShawlConstructionEntry]
        self._weight_lookup: MappingProxyType[str, YarnWeightEntry]

        self._load_all()
        self._validate_cross_references()
        logger.debug("Loaded reference tables from %s", data_dir)

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Reference data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse reference data file {path}: {exc}") from exc

    def _load_all(self) -> None:
        self._load_yarn_weights()
        self._load_project_types()
        self._load_ranges()
        self._load_shawl_constructions()

    def _load_yarn_weights(self) -> None:
        data = self._load_yaml("yarn_weights.yaml")
        result: dict[str, YarnWeightEntry] = {}
        lookup: dict[str, YarnWeightEntry] = {}
        for entry in data["entries"]:
            weight = YarnWeightEntry(
                id=entry["id"],
                consumption_m_per_m2=float(entry["consumption_m_per_m2"]),
                standard=entry["standard"],
                aliases=tuple(entry.get("aliases", [])),
                notes=entry.get("notes", "").strip(),
            )
            result[weight.id] = weight
            for name in (weight.id, *weight.aliases):
                lookup[_weight_key(name)] = weight
        self.yarn_weights = MappingProxyType(result)
        self._weight_lookup = MappingProxyType(lookup)
        self.default_consumption_m_per_m2 = float(data["default_consumption_m_per_m2"])

    def _load_project_types(self) -> None:
        data = self._load_yaml("project_types.yaml")
        result: dict[ProjectType, ProjectTypeEntry] = {}
        for entry in data["entries"]:
            pt = ProjectType(entry["id"])
            areas = entry.get("predefined_surface_areas")
            dims = entry.get("default_dimensions")
            result[pt] = ProjectTypeEntry(
                id=pt,
                display_name=entry["display_name"],
                estimation_method=EstimationMethod(entry["estimation_method"]),
                requires_dimensions=entry["requires_dimensions"],
                requires_size=entry["requires_size"],
                predefined_surface_areas=(
                    MappingProxyType({GarmentSize(k): float(v) for k, v in areas.items()})
                    if areas is not None
                    else None
                ),
                default_dimensions=(
                    ProjectDimensions(
                        width=float(dims["width"]),
                        length=float(dims["length"]),
                        unit=LengthUnit(dims["unit"]),
                    )
                    if dims is not None
                    else None
                ),
            )
        self.project_types = MappingProxyType(result)

    def _load_ranges(self) -> None:
        data = self._load_yaml("plausibility_ranges.yaml")
        result: dict[str, PlausibilityRange] = {}
        for entry in data["entries"]:
            unit = entry.get("unit")
            result[entry["id"]] = PlausibilityRange(
                id=entry["id"],
                minimum=float(entry["minimum"]),
                maximum=float(entry["maximum"]),
                description=entry["description"].strip(),
                unit=LengthUnit(unit) if unit is not None else None,
            )
        self.ranges = MappingProxyType(result)

    def _load_shawl_constructions(self) -> None:
        data = self._load_yaml("shawl_constructions.yaml")
        result: dict[ConstructionMethod, ShawlConstructionEntry] = {}
        for entry in data["entries"]:
            method = ConstructionMethod(entry["id"])
            result[method] = ShawlConstructionEntry(
                id=method,
                display_name=entry["display_name"],
                cast_on_stitches=entry.get("cast_on_stitches"),
                final_stitches=entry.get("final_stitches"),
                stitches_per_event=int(entry["stitches_per_event"]),
                shaping_frequency=int(entry["shaping_frequency"]),
                depth_tolerance=float(entry["depth_tolerance"]),
                wingspan_tolerance=float(entry["wingspan_tolerance"]),
                wingspan_shape_factor=float(entry["wingspan_shape_factor"]),
                description=entry["description"].strip(),
            )
        self.shawl_constructions = MappingProxyType(result)

    # ── Cross-reference validation ─────────────────────────────────────────────

    def _validate_cross_references(self) -> None:
        """
        Run at startup. Raises ValueError listing all problems found if any
        lookup table is incomplete or violates a structural invariant.
        """
        errors: list[str] = []
        self._check_yarn_weights(errors)
        self._check_project_types(errors)
        self._check_ranges(errors)
        self._check_shawl_constructions(errors)
        if errors:
            raise ValueError(
                "Reference registry validation failed:\n"
                + "\n".join(f"  • {e}" for e in errors)
            )

    def _check_yarn_weights(self, errors: list[str]) -> None:
        if self.default_consumption_m_per_m2 <= 0:
            errors.append("default_consumption_m_per_m2 must be positive")
        seen: dict[str, str] = {}
        for weight in self.yarn_weights.values():
            if weight.consumption_m_per_m2 <= 0:
                errors.append(f"yarn weight {weight.id!r}: consumption must be positive")
            for name in (weight.id, *weight.aliases):
                key = _weight_key(name)
                if key in seen and seen[key] != weight.id:
                    errors.append(
                        f"yarn weight name {name!r} is claimed by both "
                        f"{seen[key]!r} and {weight.id!r}"
                    )
                seen[key] = weight.id

    def _check_project_types(self, errors: list[str]) -> None:
        """Every ProjectType needs an entry, and every entry a way to get an area."""
        for pt in ProjectType:
            entry = self.project_types.get(pt)
            if entry is None:
                errors.append(f"project type {pt.value!r}: no entry in project_types")
                continue
            areas = entry.predefined_surface_areas
            if entry.requires_size:
                missing = [s.value for s in GarmentSize if areas is None or s not in areas]
                if missing:
                    errors.append(
                        f"project type {pt.value!r}: requires_size but has no area for "
                        f"{', '.join(missing)}"
                    )
            if areas is None and entry.default_dimensions is None and not entry.requires_dimensions:
                errors.append(f"project type {pt.value!r}: no way to determine surface area")

    def _check_ranges(self, errors: list[str]) -> None:
        for r in self.ranges.values():
            if r.minimum > r.maximum:
                errors.append(f"range {r.id!r}: minimum {r.minimum} exceeds maximum {r.maximum}")

    def _check_shawl_constructions(self, errors: list[str]) -> None:
        for method in ConstructionMethod:
            entry = self.shawl_constructions.get(method)
            if entry is None:
                errors.append(f"construction method {method.value!r}: no entry")
                continue
            if entry.stitches_per_event < 1 or entry.shaping_frequency < 1:
                errors.append(
                    f"construction method {method.value!r}: shaping rate must be >= 1"
                )
            if entry.cast_on_stitches is None and entry.final_stitches is None:
                errors.append(
                    f"construction method {method.value!r}: needs a fixed cast-on "
                    f"or a fixed final stitch count"
                )

    # ── Query API ──────────────────────────────────────────────────────────────

    def find_yarn_weight(self, category: str | None) -> YarnWeightEntry | None:
        """Return the weight entry for *category* (case-insensitive, aliases allowed)."""
        if category is None:
            return None
        return self._weight_lookup.get(_weight_key(category))

    def consumption_factor(self, category: str | None) -> float:
        """Meters of yarn per square meter of fabric for *category*.

        Unknown or absent categories fall back to the default factor.
        """
        entry = self.find_yarn_weight(category)
        return entry.consumption_m_per_m2 if entry else self.default_consumption_m_per_m2

    def is_standard_weight(self, category: str) -> bool:
        entry = self.find_yarn_weight(category)
        return entry is not None and entry.standard

    def get_project_type(self, project_type: ProjectType) -> ProjectTypeEntry:
        try:
            return self.project_types[project_type]
        except KeyError:
            raise KeyError(f"No project type entry for {project_type!r}") from None

    def get_range(self, range_id: str, unit: LengthUnit | None = None) -> PlausibilityRange:
        """Return plausibility range *range_id*, rescaled to *unit* when given."""
        try:
            r = self.ranges[range_id]
        except KeyError:
            raise KeyError(f"No plausibility range {range_id!r}") from None
        return r.in_unit(unit) if unit is not None else r

    def get_shawl_construction(self, method: ConstructionMethod) -> ShawlConstructionEntry:
        try:
            return self.shawl_constructions[method]
        except KeyError:
            raise KeyError(f"No shawl construction entry for {method!r}") from None


def _weight_key(name: str) -> str:
    return " ".join(name.split()).casefold()


# ── Module-level singleton ─────────────────────────────────────────────────────
#
# Initialized eagerly at import time so there is no lazy-init race condition
# in concurrent contexts. The registry is read-only after construction, so
# sharing it across threads is safe.

_registry: ReferenceRegistry = ReferenceRegistry()


def get_registry() -> ReferenceRegistry:
    """Return the module-level registry singleton."""
    return _registry
