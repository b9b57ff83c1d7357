import pytest

from refparser.core.models import Dataset, Sequence
from refparser.dictionary import MemoryDictionary
from refparser.features import (
    ABSENT,
    DEFAULT_FEATURES,
    Brackets,
    Caps,
    Category,
    DictionaryFeature,
    FeaturePipeline,
    Keyword,
    Locator,
    Number,
    Position,
    Punctuation,
    Terminal,
    build_feature,
)
from refparser.core.strings import scrub


def observe(feature, token, sequence=None, index=0):
    sequence = sequence or Sequence.from_values([token])
    return feature.observe(token, alpha=scrub(token), index=index, sequence=sequence)


@pytest.fixture
def pipeline() -> FeaturePipeline:
    dictionary = MemoryDictionary().open()
    dictionary.put("journal", 25)
    return FeaturePipeline.from_specs(DEFAULT_FEATURES, dictionary=dictionary)


def make_dataset() -> Dataset:
    return Dataset.parse(
        "Doe, J. (2001). A study of things. Journal of Foo, 12(3), 1-10. doi:10.1000/xyz\n"
        "“Quoted” — ... ( ) ÆØÅ Ⅻ 2nd\n"
    )


def test_pipeline_order_matches_default_features(pipeline: FeaturePipeline) -> None:
    assert pipeline.names == [
        "canonical",
        "category",
        "prefix2",
        "suffix2",
        "caps",
        "number",
        "dictionary",
        "keyword",
        "position",
        "punctuation",
        "brackets",
        "terminal",
        "locator",
    ]


def test_every_token_gets_one_observation_per_feature(pipeline: FeaturePipeline) -> None:
    dataset = make_dataset()
    values_before = [sequence.values for sequence in dataset]

    pipeline.expand(dataset)

    for sequence in dataset:
        for index, token in enumerate(sequence):
            assert token.index == index
            assert len(token.observations) == len(pipeline)
            assert all(isinstance(value, str) and value for value in token.observations)
    assert [sequence.values for sequence in dataset] == values_before


def test_expand_is_idempotent(pipeline: FeaturePipeline) -> None:
    dataset = pipeline.expand(make_dataset())
    first = [[list(token.observations) for token in sequence] for sequence in dataset]

    pipeline.expand(dataset)

    assert [[token.observations for token in sequence] for sequence in dataset] == first


def test_unknown_feature_name() -> None:
    with pytest.raises(ValueError):
        build_feature("nope")


@pytest.mark.parametrize(
    "token, expected",
    [("Doe,", "Lu-Po"), ("2001", "Nd-Nd"), ("(2001).", "Ps-Po")],
)
def test_category(token: str, expected: str) -> None:
    assert observe(Category(), token) == expected


@pytest.mark.parametrize(
    "token, expected",
    [("ACM", "upper"), ("Doe,", "title"), ("J.", "title"), ("of", "lower"), ("McDonald", "mixed"), ("2001", ABSENT)],
)
def test_caps(token: str, expected: str) -> None:
    assert observe(Caps(), token) == expected


@pytest.mark.parametrize(
    "token, expected",
    [
        ("(2001).", "year"),
        ("2001a,", "year"),
        ("1-10.", "range"),
        ("2nd", "ordinal"),
        ("12", "numeric"),
        ("12(3),", "mixed"),
        ("xii", "roman"),
        ("I", ABSENT),
        ("things", ABSENT),
    ],
)
def test_number(token: str, expected: str) -> None:
    assert observe(Number(), token) == expected


@pytest.mark.parametrize(
    "token, expected",
    [("Doe,", "comma"), ("things.", "period"), ("Foo:", "colon"), ("(2001)", ABSENT), ("“Quoted”", "quote"), ("word", ABSENT)],
)
def test_punctuation(token: str, expected: str) -> None:
    assert observe(Punctuation(), token) == expected


@pytest.mark.parametrize(
    "token, expected",
    [("(2001).", "paren-open-close"), ("(Eds.", "paren-open"), ("3]", "square-close"), ("word", ABSENT)],
)
def test_brackets(token: str, expected: str) -> None:
    assert observe(Brackets(), token) == expected


@pytest.mark.parametrize(
    "token, expected",
    [("things.", "strong"), ("J.", "weak"), ("J.-P.", "weak"), ("eds.", "weak"), ("Title:", "moderate"), ("Doe,", ABSENT)],
)
def test_terminal(token: str, expected: str) -> None:
    assert observe(Terminal(), token) == expected


@pytest.mark.parametrize(
    "token, expected",
    [
        ("doi:10.1000/xyz", "doi"),
        ("https://example.org/paper", "url"),
        ("ISBN", "isbn"),
        ("978-3-16-148410-0", "isbn"),
        ("2101.00001", "arxiv"),
        ("PMID:", "pmid"),
        ("Doe", ABSENT),
    ],
)
def test_locator(token: str, expected: str) -> None:
    assert observe(Locator(), token) == expected


@pytest.mark.parametrize(
    "token, expected",
    [("(Eds.)", "editor"), ("Vol.", "volume"), ("pp.", "page"), ("&", "and"), ("März", "month"), ("Doe", ABSENT)],
)
def test_keyword(token: str, expected: str) -> None:
    assert observe(Keyword(), token) == expected


def test_position_buckets() -> None:
    sequence = Sequence.from_values([str(i) for i in range(20)])
    feature = Position()

    assert observe(feature, "0", sequence, 0) == "first"
    assert observe(feature, "10", sequence, 10) == "5"
    assert observe(feature, "19", sequence, 19) == "last"


def test_dictionary_buckets() -> None:
    dictionary = MemoryDictionary().open()
    dictionary.put("once", 1)
    dictionary.put("some", 4)
    dictionary.put("often", 40)
    feature = DictionaryFeature(dictionary)

    assert observe(feature, "Once") == "1"
    assert observe(feature, "some") == "few"
    assert observe(feature, "often,") == "many"
    assert observe(feature, "never") == "0"
    assert observe(DictionaryFeature(), "often") == "0"
