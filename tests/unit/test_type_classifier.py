import pytest

from refparser.normalizers import Type, classify


@pytest.mark.parametrize(
    "record, expected",
    [
        ({"journal": "X"}, "article"),
        ({"container-title": "Proceedings of ICML"}, "paper-conference"),
        ({"container-title": ["Annual Meeting of the ACL"]}, "paper-conference"),
        ({"container-title": ["Proc. of the 3rd Workshop"]}, "paper-conference"),
        ({"container-title": "Journal of Foo"}, "chapter"),
        ({"genre": "PhD thesis"}, "thesis"),
        ({"genre": ["Doctoral dissertation"]}, "thesis"),
        ({"genre": ["Technical report"]}, "report"),
        ({"genre": ["Unpublished manuscript"]}, "manuscript"),
        ({"genre": ["Patent"]}, "patent"),
        ({"genre": ["Personal communication"]}, "personal_communication"),
        ({"genre": ["Interview"]}, "interview"),
        ({"genre": ["Available online"]}, "webpage"),
        ({"medium": "DVD"}, "motion_picture"),
        ({"medium": ["Television broadcast"]}, "broadcast"),
        ({"publisher": "Acme Press"}, "book"),
        ({}, None),
    ],
)
def test_classify(record, expected) -> None:
    assert classify(record) == expected


def test_rule_order_journal_beats_publisher() -> None:
    assert classify({"journal": "X", "publisher": "Acme"}) == "article"
    assert classify({"container-title": "Handbook", "publisher": "Acme"}) == "chapter"


def test_unmatched_genre_or_medium_leaves_type_unset() -> None:
    assert classify({"genre": ["Poem"], "publisher": ["Acme"]}) is None
    assert classify({"genre": ["Online"]}) is None
    assert classify({"medium": ["Audio CD"], "publisher": ["Acme"]}) is None


def test_type_normalizer_sets_type_only_when_classified() -> None:
    record = {"journal": ["Journal of Foo"]}
    Type().normalize(record)
    assert record["type"] == "article"

    record = {"title": ["Untitled"]}
    Type().normalize(record)
    assert "type" not in record


def test_type_normalizer_replaces_stale_type() -> None:
    record = {"journal": ["Journal of Foo"], "type": ["book"]}
    Type().normalize(record)
    assert record["type"] == "article"

    record = {"title": ["Untitled"], "type": "review"}
    Type().normalize(record)
    assert "type" not in record


def test_rules_test_key_presence() -> None:
    assert classify({"journal": "", "publisher": "Acme"}) == "article"
    assert classify({"container-title": [], "publisher": "Acme"}) == "chapter"
