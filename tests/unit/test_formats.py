from refparser.formats import FORMATTERS, format_bibtex, format_citeproc, format_csl
from refparser.formats.bibtex import citation_key, format_name

ARTICLE = {
    "author": [{"family": "Müller", "given": "K."}, {"family": "Roe", "given": "R."}, {"literal": "others"}],
    "title": ["Parsing & labeling"],
    "journal": ["Journal of Foo"],
    "date": ["2001-05"],
    "volume": ["12"],
    "issue": ["3"],
    "pages": ["1–10"],
    "doi": ["10.1000/xyz"],
    "type": "article",
}

BOOK = {
    "editor": [{"family": "Beethoven", "given": "Ludwig", "particle": "van"}],
    "title": ["Collected works"],
    "location": ["Vienna"],
    "publisher": ["Acme"],
    "date": ["1810"],
    "type": "book",
}


def test_format_name() -> None:
    assert format_name({"family": "Beethoven", "given": "Ludwig", "particle": "van"}) == "van Beethoven, Ludwig"
    assert format_name({"family": "King", "given": "Martin", "suffix": "Jr."}) == "King, Jr., Martin"
    assert format_name({"literal": "World Health Organization"}) == "{World Health Organization}"
    assert format_name({"literal": "others"}) == "others"


def test_citation_keys_are_unique() -> None:
    taken: set = set()

    assert citation_key(ARTICLE, taken) == "muller2001"
    assert citation_key(ARTICLE, taken) == "muller2001a"
    assert citation_key({}, taken) == "ref"


def test_bibtex_entry() -> None:
    text = format_bibtex([ARTICLE, BOOK])

    article, book = text.split("\n\n")
    assert article.splitlines() == [
        "@article{muller2001,",
        "  author = {Müller, K. and Roe, R. and others},",
        "  doi = {10.1000/xyz},",
        "  journal = {Journal of Foo},",
        "  month = {5},",
        "  number = {3},",
        "  pages = {1--10},",
        "  title = {Parsing \\& labeling},",
        "  volume = {12},",
        "  year = {2001}",
        "}",
    ]
    assert book.startswith("@book{beethoven1810,")
    assert "  editor = {van Beethoven, Ludwig}," in book
    assert "  address = {Vienna}," in book
    assert "  publisher = {Acme}," in book


def test_bibtex_types() -> None:
    assert format_bibtex([{"type": "chapter", "container-title": ["Handbook"]}]).startswith("@incollection{ref,")
    assert "booktitle = {Proc}" in format_bibtex([{"type": "paper-conference", "container-title": ["Proc"]}])
    assert "school = {MIT}" in format_bibtex([{"type": "thesis", "publisher": ["MIT"]}])
    assert format_bibtex([{"title": ["Untyped"]}]).startswith("@misc{ref,")


def test_csl_items_use_edtf_dates() -> None:
    [item] = format_csl([ARTICLE])

    assert item["id"] == "muller2001"
    assert item["type"] == "article-journal"
    assert item["issued"] == "2001-05"
    assert item["container-title"] == "Journal of Foo"
    assert item["page"] == "1–10"
    assert item["DOI"] == "10.1000/xyz"
    assert item["author"][0] == {"family": "Müller", "given": "K."}


def test_citeproc_items_use_date_parts() -> None:
    items = format_citeproc([ARTICLE, BOOK, {"date": ["in press"]}])

    assert items[0]["issued"] == {"date-parts": [[2001, 5]]}
    assert items[1]["issued"] == {"date-parts": [[1810]]}
    assert items[1]["publisher-place"] == "Vienna"
    assert items[2]["issued"] == {"literal": "in press"}


def test_formatters_registry() -> None:
    assert set(FORMATTERS) == {"bibtex", "citeproc", "csl", "hash"}
    assert FORMATTERS["hash"]([ARTICLE]) == [ARTICLE]
