"""Token-level feature observers and the pipeline that applies them."""

from .base import ABSENT, FEATURE_REGISTRY, Feature, FeaturePipeline, build_feature
from .contextual import DictionaryFeature, Keyword, Locator, Position
from .lexical import Affix, Brackets, Canonical, Caps, Category, Number, Punctuation, Terminal

# Order must match the order the labeling model was trained with.
DEFAULT_FEATURES = (
    "canonical",
    "category",
    {"name": "affix", "size": 2},
    {"name": "affix", "size": 2, "suffix": True},
    "caps",
    "number",
    "dictionary",
    "keyword",
    "position",
    "punctuation",
    "brackets",
    "terminal",
    "locator",
)

__all__ = [
    "ABSENT",
    "DEFAULT_FEATURES",
    "FEATURE_REGISTRY",
    "Affix",
    "Brackets",
    "Canonical",
    "Caps",
    "Category",
    "DictionaryFeature",
    "Feature",
    "FeaturePipeline",
    "Keyword",
    "Locator",
    "Number",
    "Position",
    "Punctuation",
    "Terminal",
    "build_feature",
]
