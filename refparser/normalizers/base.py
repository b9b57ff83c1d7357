"""Normalizer interface and the fault-isolating cascade that runs them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Optional, Type

from refparser.core.models import Record
from refparser.exceptions import NormalizationError

logger = logging.getLogger(__name__)

NORMALIZER_REGISTRY: Dict[str, Type["Normalizer"]] = {}


def segments(record: Record, key: str) -> List[Any]:
    """Return the values under *key* as a list; a bare string or dict is one segment."""

    values = record.get(key)
    if values is None:
        return []
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]


class Normalizer:
    """Transforms a labeled record in place.

    Subclasses set ``key`` to register themselves. A normalizer may be
    skipped via ``skip``; the cascade then passes the record through.
    """

    key: ClassVar[Optional[str]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.key:
            NORMALIZER_REGISTRY[cls.key] = cls

    def __init__(self, *, skip: bool = False) -> None:
        self.skip = skip

    @property
    def name(self) -> str:
        return self.key or type(self).__name__.lower()

    def normalize(self, record: Record) -> Record:
        raise NotImplementedError

    def map_values(self, record: Record, keys: Iterable[str], func: Callable[[str], Optional[str]]) -> None:
        """Apply ``func`` to every string segment stored under ``keys``.

        Segments mapped to an empty value are dropped, and keys left without
        segments are removed.
        """

        for key in keys:
            if key not in record:
                continue
            mapped = []
            for value in segments(record, key):
                if isinstance(value, str):
                    value = func(value)
                if value:
                    mapped.append(value)
            if mapped:
                record[key] = mapped
            else:
                del record[key]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(skip={self.skip})"


@dataclass
class StageResult:
    """Outcome of one normalizer stage."""

    stage: str
    ok: bool = True
    skipped: bool = False
    error: Optional[NormalizationError] = None

    @property
    def diagnostic(self) -> Optional[str]:
        return str(self.error) if self.error else None


@dataclass
class CascadeOutcome:
    """The normalized record and what happened at every stage."""

    record: Record
    stages: List[StageResult] = field(default_factory=list)

    @property
    def diagnostics(self) -> List[str]:
        return [stage.diagnostic for stage in self.stages if stage.diagnostic]

    @property
    def ok(self) -> bool:
        return all(stage.ok for stage in self.stages)


class NormalizationCascade:
    """Runs normalizers in their declared order.

    A failing stage never aborts the cascade: its error is logged and
    recorded, and the next stage continues with the record as the failing
    stage left it.
    """

    def __init__(self, normalizers: Iterable[Normalizer]) -> None:
        self.normalizers: List[Normalizer] = list(normalizers)

    def __len__(self) -> int:
        return len(self.normalizers)

    @property
    def names(self) -> List[str]:
        return [normalizer.name for normalizer in self.normalizers]

    def run(self, record: Record) -> CascadeOutcome:
        outcome = CascadeOutcome(record=record)
        for normalizer in self.normalizers:
            if normalizer.skip:
                outcome.stages.append(StageResult(normalizer.name, skipped=True))
                continue
            try:
                result = normalizer.normalize(outcome.record)
            except Exception as exc:
                error = NormalizationError(normalizer.name, exc)
                logger.warning("%s", error)
                outcome.stages.append(StageResult(normalizer.name, ok=False, error=error))
                continue
            if result is not None:
                outcome.record = result
            outcome.stages.append(StageResult(normalizer.name))
        return outcome

    def normalize(self, record: Record) -> Record:
        return self.run(record).record


def build_normalizer(spec: str | Dict[str, Any] | Normalizer, *, skip: Iterable[str] = ()) -> Normalizer:
    """Instantiate a normalizer from a registry name or ``{"name": ..., **options}``."""

    if isinstance(spec, Normalizer):
        normalizer = spec
    else:
        if isinstance(spec, str):
            spec = {"name": spec}
        options = dict(spec)
        name = options.pop("name")
        try:
            normalizer_cls = NORMALIZER_REGISTRY[name]
        except KeyError:
            raise ValueError(f"Unknown normalizer: {name}") from None
        normalizer = normalizer_cls(**options)
    if normalizer.name in set(skip):
        normalizer.skip = True
    return normalizer


__all__ = [
    "CascadeOutcome",
    "NORMALIZER_REGISTRY",
    "NormalizationCascade",
    "Normalizer",
    "StageResult",
    "build_normalizer",
    "segments",
]
