"""Custom exception hierarchy for the reference parser."""


class RefParserError(Exception):
    """Base exception for reference parser errors."""


class ConfigError(RefParserError):
    """Raised when configuration is invalid or incomplete."""


class FormatError(ConfigError):
    """Raised when an unsupported output format is requested."""


class ModelError(ConfigError):
    """Raised when the labeling model is missing or cannot be loaded."""


class StorageError(RefParserError):
    """Raised when the term dictionary store cannot be opened or written."""


class DatasetError(RefParserError):
    """Raised when tagged input cannot be read into a dataset."""


class NormalizationError(RefParserError):
    """Wraps a failure raised by a single normalizer stage."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"Error in {stage} normalizer: {cause}")
        self.stage = stage
        self.cause = cause
