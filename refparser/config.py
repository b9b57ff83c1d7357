"""Application configuration for the reference parser."""

from pathlib import Path
from typing import Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path("~/.refparser")

SUPPORTED_FORMATS = ("bibtex", "citeproc", "csl", "hash", "wapiti")


class ParserConfig(BaseSettings):  # type: ignore[misc]
    """Settings controlling model paths, tokenization and output."""

    model: Path = Field(
        DEFAULT_DATA_DIR / "parser.crfsuite", description="Path to the trained labeling model"
    )
    pattern: Optional[Path] = Field(
        None, description="Feature template file; the built-in template is used when unset"
    )
    dictionary: Optional[Path] = Field(
        None, description="Directory of the LMDB term dictionary; in-memory when unset"
    )
    dictionary_source: Optional[Path] = Field(
        None, description="Word list used to populate an empty term dictionary"
    )
    dictionary_map_size: int = Field(1 << 22, description="LMDB map size in bytes")
    threads: int = Field(4, description="Parallelism hint passed through to the labeling engine")
    separator: str = Field(r"(?:\r?\n)+", description="Pattern separating references in text input")
    delimiter: str = Field(r"\s+", description="Pattern separating tokens within a reference")
    format: str = Field("hash", description="Default output format for parse")
    training_data: Optional[Path] = Field(None, description="Default training corpus")
    skip_normalizers: List[str] = Field(
        default_factory=list, description="Names of normalizers to skip"
    )
    algorithm: str = Field("lbfgs", description="Training algorithm of the labeling engine")
    max_iterations: int = Field(100, description="Training iteration cap")
    c1: float = Field(0.0, description="L1 regularization coefficient")
    c2: float = Field(1.0, description="L2 regularization coefficient")

    model_config = SettingsConfigDict(env_prefix="REFPARSER_", env_file=".env", extra="ignore")

    def model_post_init(self, __context: Any) -> None:
        """Normalize paths to absolute locations."""

        self.model = self.model.expanduser().resolve()
        for name in ("pattern", "dictionary", "dictionary_source", "training_data"):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, value.expanduser().resolve())

    @field_validator("format")
    @classmethod
    def validate_format(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in SUPPORTED_FORMATS:
            raise ValueError(f"format must be one of {', '.join(SUPPORTED_FORMATS)}")
        return value

    @field_validator("threads")
    @classmethod
    def validate_threads(cls, value: int) -> int:
        if value < 1:
            raise ValueError("threads must be positive")
        return value
