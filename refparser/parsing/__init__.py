"""Parsing utilities for reading and writing reference datasets."""

from .dataset_io import (
    dataset_to_text,
    dataset_to_xml,
    open_dataset,
    parse_dataset,
    parse_tagged_text,
    parse_tagged_xml,
    tokenize,
)

__all__ = [
    "dataset_to_text",
    "dataset_to_xml",
    "open_dataset",
    "parse_dataset",
    "parse_tagged_text",
    "parse_tagged_xml",
    "tokenize",
]
