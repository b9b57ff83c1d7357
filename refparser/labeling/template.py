"""Feature templates turning evidence vectors into labeling-engine attributes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence as SequenceType, Tuple

from refparser.core.models import Sequence
from refparser.exceptions import ConfigError

BOS = "__BOS__"
EOS = "__EOS__"

Rule = Tuple[Tuple[str, int], ...]

DEFAULT_RULES: Tuple[Rule, ...] = (
    (("canonical", -2),),
    (("canonical", -1),),
    (("canonical", 1),),
    (("canonical", 2),),
    (("canonical", -1), ("canonical", 0)),
    (("canonical", 0), ("canonical", 1)),
    (("punctuation", -1),),
    (("punctuation", 1),),
    (("punctuation", -1), ("caps", 0)),
    (("terminal", -1), ("caps", 0)),
    (("number", -1), ("number", 0)),
    (("keyword", -1),),
    (("keyword", 1),),
)


def parse_rules(text: str) -> List[Rule]:
    """Parse template text: ``name offset [name offset ...]`` per line, ``#`` comments."""

    rules: List[Rule] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) % 2:
            raise ConfigError(f"Template line {lineno} must pair feature names with offsets: {line!r}")
        try:
            rule = tuple((parts[i], int(parts[i + 1])) for i in range(0, len(parts), 2))
        except ValueError as exc:
            raise ConfigError(f"Invalid offset on template line {lineno}: {line!r}") from exc
        rules.append(rule)
    return rules


@dataclass(frozen=True)
class FeatureTemplate:
    """Expands each token's observations and its neighbours' into attribute strings.

    Every feature is always observed at offset 0; ``rules`` add neighbour and
    conjunction attributes on top.
    """

    feature_names: Tuple[str, ...]
    rules: Tuple[Rule, ...] = DEFAULT_RULES

    def __post_init__(self) -> None:
        known = set(self.feature_names)
        for rule in self.rules:
            for name, _ in rule:
                if name not in known:
                    raise ConfigError(f"Template refers to unknown feature: {name}")

    @classmethod
    def load(cls, feature_names: Iterable[str], path: Path | str | None = None) -> "FeatureTemplate":
        names = tuple(feature_names)
        if path is None:
            known = set(names)
            return cls(names, tuple(rule for rule in DEFAULT_RULES if all(name in known for name, _ in rule)))
        path = Path(path)
        if not path.is_file():
            raise ConfigError(f"Template file does not exist: {path}")
        return cls(names, tuple(parse_rules(path.read_text(encoding="utf-8"))))

    def attributes(self, sequence: Sequence) -> List[List[str]]:
        columns = {name: idx for idx, name in enumerate(self.feature_names)}
        observations = [token.observations for token in sequence]
        length = len(observations)

        def value(position: int, name: str) -> str:
            if position < 0:
                return BOS
            if position >= length:
                return EOS
            return observations[position][columns[name]]

        items: List[List[str]] = []
        for position in range(length):
            if len(observations[position]) != len(self.feature_names):
                raise ConfigError(
                    "Token observations do not match the feature template "
                    f"({len(observations[position])} != {len(self.feature_names)})"
                )
            attributes = ["bias"]
            attributes.extend(
                f"{name}={observed}" for name, observed in zip(self.feature_names, observations[position])
            )
            for rule in self.rules:
                label = "|".join(f"{name}[{offset}]" for name, offset in rule)
                observed = "|".join(value(position + offset, name) for name, offset in rule)
                attributes.append(f"{label}={observed}")
            items.append(attributes)
        return items

    def dataset_attributes(self, sequences: SequenceType[Sequence]) -> List[List[List[str]]]:
        return [self.attributes(sequence) for sequence in sequences]


__all__ = ["BOS", "DEFAULT_RULES", "EOS", "FeatureTemplate", "parse_rules"]
