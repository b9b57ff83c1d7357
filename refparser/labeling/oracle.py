"""Adapter between feature-annotated datasets and the CRF labeling engine."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pycrfsuite

from refparser.core.models import Dataset, Sequence
from refparser.exceptions import ModelError
from refparser.labeling.template import FeatureTemplate
from refparser.storage.files import atomic_write_text

logger = logging.getLogger(__name__)

CORPUS_SUFFIX = ".corpus.jsonl"


@dataclass
class ModelHandle:
    """Describes the model an oracle labels with."""

    path: Path
    sequences: int = 0
    labels: List[str] = field(default_factory=list)

    @property
    def exists(self) -> bool:
        return self.path.is_file()


@dataclass
class CheckResult:
    """Label agreement between a tagged dataset and the model's output."""

    sequences: int = 0
    sequence_errors: int = 0
    tokens: int = 0
    token_errors: int = 0

    @property
    def sequence_error_rate(self) -> float:
        return self.sequence_errors / self.sequences if self.sequences else 0.0

    @property
    def token_error_rate(self) -> float:
        return self.token_errors / self.tokens if self.tokens else 0.0


class LabelingOracle:
    """Label, train and evaluate with a ``python-crfsuite`` model.

    CRFsuite cannot resume optimization from saved weights, so incremental
    training keeps the corpus the current model was trained on in a JSON
    Lines file next to the model and retrains on that corpus plus the new
    sequences.
    """

    def __init__(
        self,
        model_path: Path | str,
        *,
        template: FeatureTemplate,
        threads: int = 4,
        algorithm: str = "lbfgs",
        params: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.model_path = Path(model_path)
        self.template = template
        self.threads = threads
        self.algorithm = algorithm
        self.params = dict(params or {})
        self._tagger: Optional[pycrfsuite.Tagger] = None
        self._corpus: Optional[List[Dict[str, Any]]] = None

    @property
    def corpus_path(self) -> Path:
        return self.model_path.with_name(self.model_path.name + CORPUS_SUFFIX)

    @property
    def handle(self) -> ModelHandle:
        corpus = self._load_corpus()
        labels = sorted({label for item in corpus for label in item["labels"]})
        return ModelHandle(path=self.model_path, sequences=len(corpus), labels=labels)

    def label(self, dataset: Dataset) -> Dataset:
        """Assign one label to every token of *dataset* and return it."""

        tagger = self._open_tagger()
        for sequence in dataset:
            if not len(sequence):
                continue
            labels = tagger.tag(self.template.attributes(sequence))
            for token, label in zip(sequence.tokens, labels):
                token.label = label
        return dataset

    def train(self, dataset: Optional[Dataset] = None, *, truncate: bool = True) -> ModelHandle:
        """Train the model on *dataset*.

        With ``truncate`` the existing model and its corpus are discarded
        first; otherwise the new sequences are added to the retained corpus.
        Without a dataset nothing changes.
        """

        if dataset is None:
            return self.handle
        if truncate:
            self.reset()
        if dataset.is_empty():
            return self.handle

        additions = []
        for sequence in dataset:
            if not len(sequence):
                continue
            if not sequence.is_labeled():
                logger.warning("Skipping unlabeled training sequence: %s", sequence.to_text()[:80])
                continue
            additions.append(self._corpus_item(sequence))

        if not additions:
            return self.handle

        corpus = self._load_corpus() + additions
        self._fit(corpus)
        self._write_corpus(corpus)
        self._corpus = corpus
        return self.handle

    def learn(self, dataset: Optional[Dataset]) -> ModelHandle:
        return self.train(dataset, truncate=False)

    def check(self, dataset: Dataset) -> CheckResult:
        """Compare the labels of a tagged *dataset* with the model's predictions."""

        predicted = self.label(dataset.copy(keep_labels=False))
        result = CheckResult()
        for gold, guess in zip(dataset, predicted):
            if not len(gold):
                continue
            errors = sum(1 for expected, actual in zip(gold.labels, guess.labels) if expected != actual)
            result.sequences += 1
            result.tokens += len(gold)
            result.token_errors += errors
            if errors:
                result.sequence_errors += 1
        return result

    def reset(self) -> None:
        """Discard the trained model and its retained corpus."""

        self.close()
        self.model_path.unlink(missing_ok=True)
        self.corpus_path.unlink(missing_ok=True)
        self._corpus = []

    def close(self) -> None:
        if self._tagger is not None:
            self._tagger.close()
            self._tagger = None

    def _open_tagger(self) -> pycrfsuite.Tagger:
        if self._tagger is not None:
            return self._tagger
        if not self.model_path.is_file():
            raise ModelError(f"Labeling model not found: {self.model_path}")

        tagger = pycrfsuite.Tagger()
        try:
            tagger.open(str(self.model_path))
        except (OSError, ValueError) as exc:
            raise ModelError(f"Failed to load labeling model {self.model_path}: {exc}") from exc
        logger.debug("Loaded labeling model %s", self.model_path)
        self._tagger = tagger
        return tagger

    def _fit(self, corpus: List[Dict[str, Any]]) -> None:
        trainer = pycrfsuite.Trainer(verbose=False)
        for item in corpus:
            sequence = Sequence.from_values(item["values"], item["labels"])
            for token, observations in zip(sequence.tokens, item["observations"]):
                token.observations = list(observations)
            trainer.append(self.template.attributes(sequence), item["labels"])

        trainer.select(self.algorithm)
        trainer.set_params(self.params)
        logger.info(
            "Training %s model on %d sequences (threads hint: %d)",
            self.algorithm,
            len(corpus),
            self.threads,
        )

        self.close()
        self.model_path.parent.mkdir(parents=True, exist_ok=True)
        trainer.train(str(self.model_path))

    def _corpus_item(self, sequence: Sequence) -> Dict[str, Any]:
        return {
            "values": sequence.values,
            "observations": [list(token.observations) for token in sequence.tokens],
            "labels": [str(label) for label in sequence.labels],
        }

    def _load_corpus(self) -> List[Dict[str, Any]]:
        if self._corpus is not None:
            return list(self._corpus)
        corpus: List[Dict[str, Any]] = []
        if self.corpus_path.is_file():
            with self.corpus_path.open(encoding="utf-8") as handle:
                for line in handle:
                    if line.strip():
                        corpus.append(json.loads(line))
        self._corpus = corpus
        return list(corpus)

    def _write_corpus(self, corpus: List[Dict[str, Any]]) -> None:
        lines = "".join(json.dumps(item, ensure_ascii=False) + "\n" for item in corpus)
        atomic_write_text(self.corpus_path, lines)


__all__ = ["CheckResult", "LabelingOracle", "ModelHandle"]
