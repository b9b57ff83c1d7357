from pathlib import Path

import pytest

from refparser.core.models import Dataset, Sequence
from refparser.exceptions import DatasetError
from refparser.parsing.dataset_io import (
    dataset_to_text,
    dataset_to_xml,
    open_dataset,
    parse_dataset,
    parse_tagged_text,
    parse_tagged_xml,
    tokenize,
)

TAGGED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<dataset>
  <sequence>
    <author>Doe, J.</author>
    <date>(2001).</date>
    <title>A  study of
      things.</title>
  </sequence>
  <sequence>
    <author>Roe, R.</author>
    <container-title>In: Handbook.</container-title>
  </sequence>
</dataset>
"""


def test_tokenize_drops_empty_values() -> None:
    assert tokenize("  Doe,  J.  2001 ") == ["Doe,", "J.", "2001"]
    assert tokenize("a|b||c", r"\|") == ["a", "b", "c"]


def test_plain_text_splits_on_separator_and_delimiter() -> None:
    dataset = parse_dataset("Doe, J. A title.\n\n\nRoe, R. Another.\n")

    assert len(dataset) == 2
    assert dataset[0].values == ["Doe,", "J.", "A", "title."]
    assert dataset[1].values == ["Roe,", "R.", "Another."]
    assert all(label is None for label in dataset[0].labels)
    assert [token.index for token in dataset[0]] == [0, 1, 2, 3]


def test_custom_separator() -> None:
    dataset = parse_dataset("Doe 2001 || Roe 2002", separator=r"\s*\|\|\s*")

    assert [sequence.values for sequence in dataset] == [["Doe", "2001"], ["Roe", "2002"]]


def test_tagged_xml_assigns_labels_per_token() -> None:
    dataset = parse_tagged_xml(TAGGED_XML)

    first = dataset[0]
    assert first.values == ["Doe,", "J.", "(2001).", "A", "study", "of", "things."]
    assert first.labels == ["author", "author", "date", "title", "title", "title", "title"]
    assert dataset[1].labels[-1] == "container-title"
    assert dataset.labels == ["author", "date", "title", "container-title"]


def test_tagged_xml_without_labels() -> None:
    dataset = parse_tagged_xml(TAGGED_XML, tagged=False)

    assert dataset[0].labels == [None] * 7


def test_invalid_xml_raises_dataset_error() -> None:
    with pytest.raises(DatasetError):
        parse_tagged_xml("<dataset><sequence>")


def test_tagged_text_reads_two_columns() -> None:
    dataset = parse_tagged_text("Doe, author\nJ. author\n2001 date\n\nRoe, author\n")

    assert len(dataset) == 2
    assert dataset[0].labels == ["author", "author", "date"]
    assert dataset[1].values == ["Roe,"]


def test_tagged_text_requires_labels() -> None:
    with pytest.raises(DatasetError):
        parse_tagged_text("Doe,\n")


def test_parse_dataset_detects_xml() -> None:
    dataset = parse_dataset(TAGGED_XML, tagged=True)

    assert dataset[0].is_labeled()


def test_open_dataset_reads_xml_and_text(tmp_path: Path) -> None:
    xml_path = tmp_path / "core.xml"
    xml_path.write_text(TAGGED_XML, encoding="utf-8")
    text_path = tmp_path / "refs.txt"
    text_path.write_text("Doe, J. 2001.\nRoe, R. 2002.\n", encoding="utf-8")

    assert len(open_dataset(xml_path, tagged=True)) == 2
    assert len(Dataset.open(text_path)) == 2


def test_open_dataset_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DatasetError):
        open_dataset(tmp_path / "missing.xml")


def test_xml_written_dataset_reads_back() -> None:
    dataset = parse_tagged_xml(TAGGED_XML)

    xml = dataset_to_xml(dataset)
    assert "<container-title>In: Handbook.</container-title>" in xml

    again = parse_tagged_xml(xml)
    assert [sequence.labels for sequence in again] == [sequence.labels for sequence in dataset]


def test_dataset_to_text_two_columns() -> None:
    dataset = Dataset([Sequence.from_values(["Doe,", "2001"], ["author", "date"])])

    assert dataset_to_text(dataset) == "Doe, author\n2001 date\n"
    assert dataset.to_text() == dataset_to_text(dataset)


def test_sequence_to_record_groups_adjacent_labels() -> None:
    sequence = Sequence.from_values(
        ["Doe,", "J.", "Title", "here.", "Roe,", "R."],
        ["author", "author", "title", "title", "author", None],
    )

    assert sequence.to_record() == {"author": ["Doe, J.", "Roe,"], "title": ["Title here."]}
