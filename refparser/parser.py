"""Parser facade composing features, the labeling model and the normalizers.

Example
-------
```python
from refparser import Parser

parser = Parser(model="~/.refparser/parser.crfsuite")
records = parser.parse("Doe, J. (2001). A title. Journal of Things, 12(3), 1-10.")
print(records[0]["type"], records[0]["author"])
```
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence as SequenceType

from pydantic import ValidationError

from .config import SUPPORTED_FORMATS, ParserConfig
from .core.models import Dataset, Record, Sequence
from .dictionary import Dictionary, LMDBDictionary, MemoryDictionary
from .exceptions import ConfigError, FormatError
from .features import DEFAULT_FEATURES, Feature, FeaturePipeline
from .formats import FORMATTERS
from .labeling import CheckResult, FeatureTemplate, LabelingOracle, ModelHandle
from .normalizers import (
    DEFAULT_NORMALIZERS,
    CascadeOutcome,
    NormalizationCascade,
    Normalizer,
    build_normalizer,
)
from .parsing import tokenize

logger = logging.getLogger(__name__)

# Strings at least this long are always treated as text, never as a path.
MAX_PATH_LENGTH = 1024


def _is_file(value: str) -> bool:
    if len(value) >= MAX_PATH_LENGTH or "\n" in value:
        return False
    try:
        return Path(value).expanduser().is_file()
    except (OSError, ValueError):
        return False


class Parser:
    """Parse free-text references into structured records.

    Collaborators not passed explicitly are built from ``config``; keyword
    ``options`` override individual config fields. ``term_dictionary`` is a
    ready store, while the ``dictionary`` option is the LMDB directory.
    """

    formats = SUPPORTED_FORMATS

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        *,
        oracle: Optional[LabelingOracle] = None,
        term_dictionary: Optional[Dictionary] = None,
        features: Optional[SequenceType[str | Dict[str, Any] | Feature]] = None,
        normalizers: Optional[SequenceType[str | Dict[str, Any] | Normalizer]] = None,
        **options: Any,
    ) -> None:
        self.config = self._configure(config, options)

        self.dictionary = term_dictionary if term_dictionary is not None else self._build_dictionary()
        self.dictionary.open()

        self.features = FeaturePipeline.from_specs(
            DEFAULT_FEATURES if features is None else features, dictionary=self.dictionary
        )
        self.normalizers = NormalizationCascade(
            build_normalizer(spec, skip=self.config.skip_normalizers)
            for spec in (DEFAULT_NORMALIZERS if normalizers is None else normalizers)
        )
        self.oracle = oracle if oracle is not None else self._build_oracle()
        logger.debug(
            "Parser ready with %d features and %d normalizers (model %s)",
            len(self.features),
            len(self.normalizers),
            self.config.model,
        )

    @classmethod
    def load(cls, path: Path | str, **options: Any) -> "Parser":
        """Build a parser that labels with the model at *path*."""

        return cls(model=path, **options)

    @staticmethod
    def _configure(config: Optional[ParserConfig], options: Dict[str, Any]) -> ParserConfig:
        if config is not None and not options:
            return config
        values = config.model_dump() if config is not None else {}
        values.update(options)
        try:
            return ParserConfig(**values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid parser configuration: {exc}") from exc

    def _build_dictionary(self) -> Dictionary:
        if self.config.dictionary is None:
            return MemoryDictionary(source=self.config.dictionary_source)
        return LMDBDictionary(
            self.config.dictionary,
            source=self.config.dictionary_source,
            map_size=self.config.dictionary_map_size,
        )

    def _build_oracle(self) -> LabelingOracle:
        template = FeatureTemplate.load(self.features.names, self.config.pattern)
        return LabelingOracle(
            self.config.model,
            template=template,
            threads=self.config.threads,
            algorithm=self.config.algorithm,
            params=self.training_params(),
        )

    def training_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "max_iterations": self.config.max_iterations,
            "feature.possible_transitions": True,
        }
        if self.config.algorithm == "lbfgs":
            params["c1"] = self.config.c1
        if self.config.algorithm in ("lbfgs", "l2sgd"):
            params["c2"] = self.config.c2
        return params

    @property
    def training_data(self) -> Optional[Path]:
        return self.config.training_data

    def expand(self, dataset: Dataset) -> Dataset:
        return self.features.expand(dataset)

    def prepare(self, input: Any, *, tagged: bool = False) -> Dataset:
        """Turn *input* into a feature-annotated dataset.

        Accepts a ``Dataset``, a single ``Sequence``, a path, reference text,
        or a list of reference strings.
        """

        separator = self.config.separator
        delimiter = self.config.delimiter

        if isinstance(input, Dataset):
            dataset = input
        elif isinstance(input, Sequence):
            dataset = Dataset([input])
        elif isinstance(input, Path) or (isinstance(input, str) and _is_file(input)):
            dataset = Dataset.open(
                Path(input).expanduser(), separator=separator, delimiter=delimiter, tagged=tagged
            )
        elif isinstance(input, str):
            dataset = Dataset.parse(input, separator=separator, delimiter=delimiter, tagged=tagged)
        elif isinstance(input, (list, tuple)):
            lines = [str(line) for line in input]
            if tagged:
                dataset = Dataset.parse("\n".join(lines), separator=separator, delimiter=delimiter, tagged=True)
            else:
                dataset = Dataset(
                    [Sequence.from_values(tokenize(line, delimiter)) for line in lines if line.strip()]
                )
        else:
            raise TypeError(f"Cannot prepare input of type {type(input).__name__}")

        return self.expand(dataset)

    def label(self, input: Any) -> Dataset:
        return self.oracle.label(self.prepare(input))

    def check(self, input: Any) -> CheckResult:
        return self.oracle.check(self.prepare(input, tagged=True))

    def train(self, input: Any = None, *, truncate: bool = True) -> ModelHandle:
        """Train the labeling model, by default on the configured training data.

        ``truncate`` discards the current model first; without it the new
        sequences are added to what the model already learned.
        """

        if input is None:
            input = self.training_data
        if input is None:
            raise ConfigError("No training input given and no training_data configured")
        return self.oracle.train(self.prepare(input, tagged=True), truncate=truncate)

    def learn(self, input: Any) -> ModelHandle:
        return self.train(input, truncate=False)

    def normalize(self, record: Record) -> Record:
        return self.normalizers.normalize(record)

    def normalize_with_diagnostics(self, record: Record) -> CascadeOutcome:
        return self.normalizers.run(record)

    def format_hash(self, dataset: Dataset) -> List[Record]:
        return [self.normalize(sequence.to_record()) for sequence in dataset if len(sequence)]

    def parse(self, input: Any, format: Optional[str] = None) -> Any:
        """Label *input* and render it in *format* (the configured format by default)."""

        format = (format or self.config.format).lower()
        if format not in self.formats:
            raise FormatError(f"format not supported: {format}")

        dataset = self.label(input)
        if format == "wapiti":
            return dataset
        return FORMATTERS[format](self.format_hash(dataset))

    def close(self) -> None:
        self.oracle.close()
        self.dictionary.close()


__all__ = ["MAX_PATH_LENGTH", "Parser"]
