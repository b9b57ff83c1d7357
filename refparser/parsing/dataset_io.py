"""Readers and writers for plain and tagged reference datasets."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from lxml import etree

from refparser.core.models import Dataset, Sequence, Token
from refparser.exceptions import DatasetError

_BLANK_LINE_PATTERN = re.compile(r"\r?\n\s*\r?\n")


def _get_text(element: etree._Element) -> str:
    """Extract normalized text from an element."""
    return " ".join("".join(element.itertext()).split())


def tokenize(text: str, delimiter: str = r"\s+") -> List[str]:
    return [value for value in re.split(delimiter, text) if value]


def parse_plain_text(text: str, *, separator: str, delimiter: str) -> Dataset:
    """Split *text* into one sequence per reference and one token per word."""

    sequences = []
    for line in re.split(separator, text):
        values = tokenize(line.strip(), delimiter)
        if values:
            sequences.append(Sequence.from_values(values))
    return Dataset(sequences)


def parse_tagged_xml(text: str | bytes, *, delimiter: str = r"\s+", tagged: bool = True) -> Dataset:
    """Read the tagged XML format.

    The expected layout is::

        <dataset>
          <sequence>
            <author>Smith, J.</author>
            <title>A title.</title>
          </sequence>
        </dataset>

    Every child of a ``sequence`` element names the label of its words. With
    ``tagged=False`` the labels are dropped.
    """

    data = text.encode("utf-8") if isinstance(text, str) else text
    try:
        root = etree.fromstring(data)
    except etree.XMLSyntaxError as exc:
        raise DatasetError(f"Invalid tagged XML: {exc}") from exc
    return _dataset_from_root(root, delimiter=delimiter, tagged=tagged)


def _dataset_from_root(root: etree._Element, *, delimiter: str, tagged: bool) -> Dataset:
    if root.tag == "sequence":
        elements = [root]
    else:
        elements = root.findall("sequence")

    sequences = []
    for element in elements:
        tokens: List[Token] = []
        for segment in element:
            if not isinstance(segment.tag, str):
                continue
            label = segment.tag if tagged else None
            for value in tokenize(_get_text(segment), delimiter):
                tokens.append(Token(value, len(tokens), [], label))
        if tokens:
            sequences.append(Sequence(tokens))
    return Dataset(sequences)


def parse_tagged_text(text: str) -> Dataset:
    """Read the two-column format: ``value label`` per line, blank line between sequences."""

    sequences = []
    for block in _BLANK_LINE_PATTERN.split(text.strip()):
        tokens: List[Token] = []
        for lineno, line in enumerate(block.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            parts = line.rsplit(None, 1)
            if len(parts) != 2:
                raise DatasetError(f"Missing label on line {lineno}: {line!r}")
            value, label = parts
            tokens.append(Token(value, len(tokens), [], label))
        if tokens:
            sequences.append(Sequence(tokens))
    return Dataset(sequences)


def parse_dataset(
    text: str,
    *,
    separator: str = r"(?:\r?\n)+",
    delimiter: str = r"\s+",
    tagged: bool = False,
) -> Dataset:
    if text.lstrip().startswith("<"):
        return parse_tagged_xml(text, delimiter=delimiter, tagged=tagged)
    if tagged:
        return parse_tagged_text(text)
    return parse_plain_text(text, separator=separator, delimiter=delimiter)


def open_dataset(
    path: Path | str,
    *,
    separator: str = r"(?:\r?\n)+",
    delimiter: str = r"\s+",
    tagged: bool = False,
) -> Dataset:
    path = Path(path)
    if not path.is_file():
        raise DatasetError(f"Dataset path does not exist: {path}")

    if path.suffix.lower() == ".xml":
        try:
            root = etree.parse(str(path)).getroot()
        except etree.XMLSyntaxError as exc:
            raise DatasetError(f"Invalid tagged XML in {path}: {exc}") from exc
        return _dataset_from_root(root, delimiter=delimiter, tagged=tagged)

    return parse_dataset(
        path.read_text(encoding="utf-8"), separator=separator, delimiter=delimiter, tagged=tagged
    )


def dataset_to_xml(dataset: Dataset) -> str:
    root = etree.Element("dataset")
    for sequence in dataset:
        element = etree.SubElement(root, "sequence")
        for label, text in sequence.segments():
            segment = etree.SubElement(element, label)
            segment.text = text
    return etree.tostring(root, pretty_print=True, encoding="unicode")


def dataset_to_text(dataset: Dataset) -> str:
    blocks = []
    for sequence in dataset:
        blocks.append("\n".join(f"{token.value} {token.label or ''}".rstrip() for token in sequence))
    return "\n\n".join(blocks) + ("\n" if blocks else "")


__all__ = [
    "dataset_to_text",
    "dataset_to_xml",
    "open_dataset",
    "parse_dataset",
    "parse_plain_text",
    "parse_tagged_text",
    "parse_tagged_xml",
    "tokenize",
]
