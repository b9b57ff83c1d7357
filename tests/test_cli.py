import io
import json
from pathlib import Path

import pytest

from refparser import cli
from refparser.core.models import Dataset, Sequence
from refparser.exceptions import ModelError
from refparser.labeling import CheckResult, ModelHandle
from refparser.parser import Parser


class DummyParser:
    instances: list = []

    def __init__(self, **options):
        self.options = options
        self.closed = False
        self.calls = []
        DummyParser.instances.append(self)

    def parse(self, input, format=None):
        self.calls.append(("parse", input, format))
        if format == "wapiti":
            return Dataset([Sequence.from_values(["Doe,"], ["author"])])
        if format == "bibtex":
            return "@misc{ref,\n}"
        return [{"author": [{"family": "Müller"}]}]

    def train(self, input=None):
        self.calls.append(("train", input))
        return ModelHandle(path=Path("parser.crfsuite"), sequences=3)

    def learn(self, input):
        self.calls.append(("learn", input))
        return ModelHandle(path=Path("parser.crfsuite"), sequences=4)

    def check(self, input):
        self.calls.append(("check", input))
        return CheckResult(sequences=4, sequence_errors=1, tokens=20, token_errors=2)

    def close(self):
        self.closed = True


class FailingParser(DummyParser):
    def parse(self, input, format=None):
        raise ModelError("Labeling model not found: parser.crfsuite")


@pytest.fixture(autouse=True)
def dummy_parser(monkeypatch):
    DummyParser.instances = []
    monkeypatch.setattr(cli, "Parser", DummyParser)


def test_parse_prints_json(capsys) -> None:
    assert cli.main(["--model", "m.crfsuite", "parse", "refs.txt"]) == 0

    parser = DummyParser.instances[0]
    assert parser.options == {"model": "m.crfsuite"}
    assert parser.calls == [("parse", "refs.txt", None)]
    assert parser.closed
    assert json.loads(capsys.readouterr().out) == [{"author": [{"family": "Müller"}]}]


def test_parse_renders_text_formats(capsys) -> None:
    cli.main(["parse", "refs.txt", "-f", "bibtex"])
    assert capsys.readouterr().out == "@misc{ref,\n}\n"

    cli.main(["parse", "refs.txt", "--format", "wapiti"])
    assert capsys.readouterr().out == "Doe, author\n\n"


def test_parse_reads_stdin(monkeypatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("Doe, J. 2001."))

    cli.main(["parse", "-"])

    assert DummyParser.instances[0].calls == [("parse", "Doe, J. 2001.", None)]


def test_parse_rejects_unknown_format() -> None:
    with pytest.raises(SystemExit):
        cli.main(["parse", "refs.txt", "-f", "ris"])


def test_train_learn_and_check(capsys) -> None:
    cli.main(["train"])
    cli.main(["learn", "more.xml"])
    cli.main(["check", "gold.xml"])

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Trained parser.crfsuite on 3 sequences"
    assert out[1] == "Updated parser.crfsuite; now trained on 4 sequences"
    assert out[2] == "1/4 sequences (25.00%), 2/20 tokens (10.00%) mislabeled"
    assert DummyParser.instances[0].calls == [("train", None)]


def test_errors_return_nonzero(monkeypatch, caplog) -> None:
    monkeypatch.setattr(cli, "Parser", FailingParser)

    assert cli.main(["parse", "refs.txt"]) == 1
    assert DummyParser.instances[0].closed
    assert "Labeling model not found" in caplog.text


def test_dictionary_option_reaches_config(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli, "Parser", Parser)
    model = tmp_path / "missing.crfsuite"

    code = cli.main(["--model", str(model), "--dictionary", str(tmp_path / "dictionary"), "parse", "Doe 2001"])

    assert code == 1
    assert (tmp_path / "dictionary" / "data.mdb").exists()


def test_train_without_input_keeps_existing_model(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli, "Parser", Parser)
    model = tmp_path / "parser.crfsuite"
    model.write_bytes(b"trained")

    assert cli.main(["--model", str(model), "train"]) == 1
    assert model.read_bytes() == b"trained"
