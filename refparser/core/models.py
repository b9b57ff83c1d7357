from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

Record = Dict[str, Any]


@dataclass
class Token:
    """A single unit of reference text and the evidence observed for it."""

    value: str
    index: int = 0
    observations: List[str] = field(default_factory=list)
    label: Optional[str] = None


@dataclass
class Sequence:
    """Ordered tokens drawn from one reference string."""

    tokens: List[Token] = field(default_factory=list)

    def __post_init__(self) -> None:
        for index, token in enumerate(self.tokens):
            token.index = index

    @classmethod
    def from_values(cls, values: Iterable[str], labels: Optional[Iterable[str]] = None) -> "Sequence":
        values = list(values)
        label_list: List[Optional[str]] = list(labels) if labels is not None else [None] * len(values)
        if len(label_list) != len(values):
            raise ValueError("labels must match the number of token values")
        return cls([Token(value, idx, [], label) for idx, (value, label) in enumerate(zip(values, label_list))])

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    @property
    def values(self) -> List[str]:
        return [token.value for token in self.tokens]

    @property
    def labels(self) -> List[Optional[str]]:
        return [token.label for token in self.tokens]

    def is_labeled(self) -> bool:
        return bool(self.tokens) and all(token.label for token in self.tokens)

    def segments(self) -> List[tuple[str, str]]:
        """Return ``(label, text)`` pairs for runs of adjacent same-label tokens."""

        segments: List[tuple[str, str]] = []
        current_label: Optional[str] = None
        current_values: List[str] = []

        for token in self.tokens:
            if token.label != current_label:
                if current_label and current_values:
                    segments.append((current_label, " ".join(current_values)))
                current_label = token.label
                current_values = []
            current_values.append(token.value)

        if current_label and current_values:
            segments.append((current_label, " ".join(current_values)))
        return segments

    def to_record(self) -> Record:
        """Group labeled tokens into a record of ``label -> [segment, ...]``."""

        record: Record = {}
        for label, text in self.segments():
            record.setdefault(label, []).append(text)
        return record

    def to_text(self) -> str:
        return " ".join(self.values)


@dataclass
class Dataset:
    """Ordered collection of sequences exchanged with the labeling engine."""

    sequences: List[Sequence] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.sequences)

    def __iter__(self) -> Iterator[Sequence]:
        return iter(self.sequences)

    def __getitem__(self, index: int) -> Sequence:
        return self.sequences[index]

    def is_empty(self) -> bool:
        return not any(len(sequence) for sequence in self.sequences)

    @property
    def labels(self) -> List[str]:
        seen: Dict[str, None] = {}
        for sequence in self.sequences:
            for label in sequence.labels:
                if label:
                    seen.setdefault(label, None)
        return list(seen)

    @classmethod
    def parse(
        cls,
        text: str,
        *,
        separator: str = r"(?:\r?\n)+",
        delimiter: str = r"\s+",
        tagged: bool = False,
    ) -> "Dataset":
        from refparser.parsing.dataset_io import parse_dataset

        return parse_dataset(text, separator=separator, delimiter=delimiter, tagged=tagged)

    @classmethod
    def open(
        cls,
        path: Path | str,
        *,
        separator: str = r"(?:\r?\n)+",
        delimiter: str = r"\s+",
        tagged: bool = False,
    ) -> "Dataset":
        from refparser.parsing.dataset_io import open_dataset

        return open_dataset(path, separator=separator, delimiter=delimiter, tagged=tagged)

    def to_xml(self) -> str:
        from refparser.parsing.dataset_io import dataset_to_xml

        return dataset_to_xml(self)

    def to_text(self) -> str:
        from refparser.parsing.dataset_io import dataset_to_text

        return dataset_to_text(self)

    def copy(self, *, keep_labels: bool = True) -> "Dataset":
        return Dataset(
            [
                Sequence(
                    [
                        Token(token.value, token.index, list(token.observations), token.label if keep_labels else None)
                        for token in sequence
                    ]
                )
                for sequence in self.sequences
            ]
        )


__all__ = ["Dataset", "Record", "Sequence", "Token"]
