from refparser.normalizers import Language, detect_language

ENGLISH = "On the origin of species by means of natural selection, or the preservation of favoured races in the struggle for life"
GERMAN = "Über die Entstehung der Arten durch natürliche Zuchtwahl oder die Erhaltung der begünstigten Rassen im Kampfe um das Dasein"


def test_detect_language() -> None:
    assert detect_language(ENGLISH) == "en"
    assert detect_language(GERMAN) == "de"


def test_detect_language_needs_letters() -> None:
    assert detect_language("") is None
    assert detect_language("1859, 12(3), 1–10") is None


def test_threshold_above_certainty_gives_nothing() -> None:
    assert detect_language(ENGLISH, threshold=1.01) is None


def test_language_normalizer_reads_titles_and_imprint() -> None:
    record = {"title": [GERMAN], "location": "Stuttgart", "author": [{"family": "Darwin"}]}

    Language().normalize(record)

    assert record["language"] == "de"


def test_existing_language_is_kept() -> None:
    record = {"title": [ENGLISH], "language": ["fr"]}

    Language().normalize(record)

    assert record["language"] == ["fr"]


def test_records_without_text_are_unchanged() -> None:
    record = {"date": ["1859"], "pages": ["1–10"]}

    Language().normalize(record)

    assert "language" not in record
