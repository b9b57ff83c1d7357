"""Feature observer interface, registry and pipeline."""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Iterable, List, Optional, Sequence as SequenceType, Type

from refparser.core.models import Dataset, Sequence
from refparser.core.strings import scrub

ABSENT = "none"

FEATURE_REGISTRY: Dict[str, Type["Feature"]] = {}


class Feature:
    """A named, stateless observation over one token.

    Subclasses set ``key`` to register themselves and implement ``observe``,
    which must return a string for every well-formed input.
    """

    key: ClassVar[Optional[str]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.key:
            FEATURE_REGISTRY[cls.key] = cls

    @property
    def name(self) -> str:
        return self.key or type(self).__name__.lower()

    def observe(self, token: str, *, alpha: str, index: int, sequence: Sequence) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


def build_feature(spec: str | Dict[str, Any] | Feature, **context: Any) -> Feature:
    """Instantiate a feature from a registry name or ``{"name": ..., **options}``.

    ``context`` supplies shared collaborators (e.g. the term dictionary) to
    features whose constructor accepts them.
    """

    if isinstance(spec, Feature):
        return spec
    if isinstance(spec, str):
        spec = {"name": spec}

    options = dict(spec)
    name = options.pop("name")
    try:
        feature_cls = FEATURE_REGISTRY[name]
    except KeyError:
        raise ValueError(f"Unknown feature: {name}") from None

    accepted = getattr(feature_cls, "context_arguments", ())
    for argument in accepted:
        if argument in context and argument not in options:
            options[argument] = context[argument]
    return feature_cls(**options)


class FeaturePipeline:
    """Ordered features producing one evidence vector per token."""

    def __init__(self, features: Iterable[Feature]) -> None:
        self.features: List[Feature] = list(features)

    def __len__(self) -> int:
        return len(self.features)

    @property
    def names(self) -> List[str]:
        return [feature.name for feature in self.features]

    def observe_sequence(self, sequence: Sequence) -> None:
        for index, token in enumerate(sequence.tokens):
            alpha = scrub(token.value)
            token.observations = [
                feature.observe(token.value, alpha=alpha, index=index, sequence=sequence)
                for feature in self.features
            ]

    def expand(self, dataset: Dataset) -> Dataset:
        """Annotate every token of *dataset* in place and return it."""

        for sequence in dataset:
            self.observe_sequence(sequence)
        return dataset

    @classmethod
    def from_specs(cls, specs: SequenceType[str | Dict[str, Any] | Feature], **context: Any) -> "FeaturePipeline":
        return cls(build_feature(spec, **context) for spec in specs)


__all__ = ["ABSENT", "FEATURE_REGISTRY", "Feature", "FeaturePipeline", "build_feature"]
