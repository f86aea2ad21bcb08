"""
Shared severity policy and field checks for every validator.

One rule applies everywhere:

  ERROR   → hard physical impossibility or malformed data (absent required
            field, non-numeric or non-positive count, value outside a closed
            set, bad UUID/version/timestamp). Blocks calculation.
  WARNING → well-formed but statistically unusual (outside a plausibility
            range from the reference registry). Calculation proceeds.

Checks append to a MessageCollector; the collector produces the immutable
ValidationResult handed back to callers.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from malaine.reference.registry import get_registry
from malaine.utilities.types import LengthUnit

E = TypeVar("E", bound=Enum)

_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationMessage:
    """A single field-scoped validation failure or warning."""

    field: str
    message: str
    severity: Severity

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[ValidationMessage, ...] = ()
    warnings: tuple[ValidationMessage, ...] = ()
    missing_fields: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors and not self.missing_fields

    @property
    def error_messages(self) -> list[str]:
        """Errors as strings, with missing top-level fields listed first."""
        return [f"{name}: required field is missing" for name in self.missing_fields] + [
            str(e) for e in self.errors
        ]

    @property
    def warning_messages(self) -> list[str]:
        return [str(w) for w in self.warnings]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": [str(e) for e in self.errors],
            "warnings": self.warning_messages,
            "missingFields": list(self.missing_fields),
        }


@dataclass
class MessageCollector:
    """Mutable accumulator used while a validator runs."""

    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)

    def error(self, field_name: str, message: str) -> None:
        self.errors.append(ValidationMessage(field_name, message, Severity.ERROR))

    def warning(self, field_name: str, message: str) -> None:
        self.warnings.append(ValidationMessage(field_name, message, Severity.WARNING))

    def missing(self, field_name: str) -> None:
        self.missing_fields.append(field_name)

    def result(self) -> ValidationResult:
        return ValidationResult(
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            missing_fields=tuple(self.missing_fields),
        )


# ── Field checks ───────────────────────────────────────────────────────────────
#
# Each check returns the cleaned value when it is usable and None otherwise,
# so callers can chain dependent checks without re-validating.


def is_number(value: Any) -> bool:
    """A finite int or float; booleans, NaN and infinities are rejected."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def require_mapping(
    out: MessageCollector, data: Mapping[str, Any], key: str, path: str
) -> Mapping[str, Any] | None:
    """Return the nested mapping at *key*, recording an error if absent or malformed."""
    value = data.get(key)
    if value is None:
        out.error(path, "required field is missing")
        return None
    if not isinstance(value, Mapping):
        out.error(path, "must be an object")
        return None
    return value


def check_text(
    out: MessageCollector, data: Mapping[str, Any], key: str, path: str
) -> str | None:
    """Required non-blank string."""
    value = data.get(key)
    if value is None:
        out.error(path, "required field is missing")
        return None
    if not isinstance(value, str) or not value.strip():
        out.error(path, "must be a non-empty string")
        return None
    return value


def check_positive(
    out: MessageCollector,
    data: Mapping[str, Any],
    key: str,
    path: str,
    *,
    required: bool = True,
    integer: bool = False,
    range_id: str | None = None,
    unit: LengthUnit | None = None,
) -> float | None:
    """
    A strictly positive number, optionally integral.

    Absent optional fields return None silently. When *range_id* is given
    and the value is outside that plausibility range (rescaled to *unit*),
    a warning is recorded and the value is still returned.
    """
    value = data.get(key)
    if value is None:
        if required:
            out.error(path, "required field is missing")
        return None
    if not is_number(value):
        out.error(path, f"must be a finite number, got {value!r}")
        return None
    if integer and value != int(value):
        out.error(path, f"must be a whole number, got {value}")
        return None
    if value <= 0:
        out.error(path, f"must be a positive number, got {value}")
        return None
    if range_id is not None:
        check_plausible(out, float(value), path, range_id, unit)
    return float(value)


def check_non_negative_int(
    out: MessageCollector, data: Mapping[str, Any], key: str, path: str
) -> int | None:
    """Optional whole number >= 0 (absent means 0)."""
    value = data.get(key)
    if value is None:
        return 0
    if not is_number(value) or value != int(value):
        out.error(path, f"must be a whole number, got {value!r}")
        return None
    if value < 0:
        out.error(path, f"cannot be negative, got {value}")
        return None
    return int(value)


def check_plausible(
    out: MessageCollector,
    value: float,
    path: str,
    range_id: str,
    unit: LengthUnit | None = None,
) -> None:
    r = get_registry().get_range(range_id, unit)
    if not r.contains(value):
        suffix = f" {r.unit.value}" if r.unit is not None else ""
        out.warning(
            path,
            f"unusual {r.description}: {value:g}{suffix} "
            f"(expected {r.minimum:g}-{r.maximum:g}{suffix})",
        )


def check_enum(
    out: MessageCollector,
    data: Mapping[str, Any],
    key: str,
    path: str,
    enum_cls: type[E],
    *,
    required: bool = True,
) -> E | None:
    """A value from a closed set; unknown values are errors."""
    value = data.get(key)
    if value is None:
        if required:
            out.error(path, "required field is missing")
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(m.value) for m in enum_cls)
        out.error(path, f"invalid value {value!r} (expected one of: {allowed})")
        return None


# ── Format checks ──────────────────────────────────────────────────────────────


def is_valid_version(value: str) -> bool:
    """Semantic version MAJOR.MINOR.PATCH."""
    return bool(_VERSION_RE.match(value))


def is_valid_uuid(value: str) -> bool:
    """RFC-4122 UUID, versions 1 to 5."""
    return bool(_UUID_RE.match(value))


def is_valid_timestamp(value: str) -> bool:
    """ISO-8601 date-time; a trailing ``Z`` is accepted for UTC."""
    if "T" not in value:
        return False
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        datetime.fromisoformat(text)
    except ValueError:
        return False
    return True
