"""Per-unit outcomes for batch passes. A pass records one result per user or job and never aborts."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class Ok:
    key: str
    detail: str = ""


@dataclass(frozen=True)
class Skipped:
    """Expected no-op: pending job already exists, not yet in the local send window, already sent."""

    key: str
    reason: str


@dataclass(frozen=True)
class Failed:
    key: str
    reason: str


UnitResult = Union[Ok, Skipped, Failed]


@dataclass
class BatchResult:
    """Aggregate of one generator or dispatcher pass."""

    name: str
    results: list[UnitResult] = field(default_factory=list)

    def add(self, result: UnitResult) -> UnitResult:
        self.results.append(result)
        return result

    @property
    def ok(self) -> list[Ok]:
        return [r for r in self.results if isinstance(r, Ok)]

    @property
    def skipped(self) -> list[Skipped]:
        return [r for r in self.results if isinstance(r, Skipped)]

    @property
    def failed(self) -> list[Failed]:
        return [r for r in self.results if isinstance(r, Failed)]

    def summary(self) -> str:
        return f"{self.name}: ok={len(self.ok)} skipped={len(self.skipped)} failed={len(self.failed)}"


class TickKind(str, Enum):
    GENERATION_TICK = "generation"
    DISPATCH_TICK = "dispatch"


@dataclass
class TickReport:
    """What one scheduler tick did. generation is None on plain dispatch ticks."""

    now: datetime
    kind: TickKind
    generation: BatchResult | None = None
    dispatch: BatchResult | None = None
