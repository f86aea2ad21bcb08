"""
Profile resolution for the yarn quantity estimator.

Gauge and yarn profiles live in the persistence layer, outside this package.
The estimator only needs their numeric and enumerated fields, so it talks to
persistence through the ProfileResolver protocol. Any object with the two
lookup methods satisfies it.

InMemoryProfileResolver (v1)
----------------------------
Dictionary-backed resolver for callers that have already loaded the
profiles, and for tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from malaine.schemas.estimation import GaugeInfo, YarnInfo


@runtime_checkable
class ProfileResolver(Protocol):
    """Protocol that all profile resolvers must satisfy."""

    def get_gauge_profile(self, profile_id: str) -> GaugeInfo | None:
        """Return the gauge profile with *profile_id*, or None if unknown."""
        ...

    def get_yarn_profile(self, profile_id: str) -> YarnInfo | None:
        """Return the yarn profile with *profile_id*, or None if unknown."""
        ...


class InMemoryProfileResolver:
    """Resolver over fixed mappings of profile id → profile."""

    def __init__(
        self,
        gauges: Mapping[str, GaugeInfo] | None = None,
        yarns: Mapping[str, YarnInfo] | None = None,
    ) -> None:
        self._gauges = MappingProxyType(dict(gauges or {}))
        self._yarns = MappingProxyType(dict(yarns or {}))

    def get_gauge_profile(self, profile_id: str) -> GaugeInfo | None:
        return self._gauges.get(profile_id)

    def get_yarn_profile(self, profile_id: str) -> YarnInfo | None:
        return self._yarns.get(profile_id)
