import pytest

from ratings.scale import DEFAULT_LABELS, describe_rating, parse_labels, parse_rating


@pytest.mark.parametrize(
    "text,expected",
    [("great", 1.0), ("GOOD", 2.0), (" ok ", 3.0), ("bad", 4.0), ("2", 2.0), ("2.5", 2.5)],
)
def test_parse_rating(text, expected):
    assert parse_rating(text) == expected


@pytest.mark.parametrize("text", ["meh", "", "nan", "inf"])
def test_parse_rating_rejects(text):
    with pytest.raises(ValueError):
        parse_rating(text)


def test_parse_rating_custom_labels():
    labels = parse_labels("love=1, hate=5")
    assert labels == {"love": 1.0, "hate": 5.0}
    assert parse_rating("Hate", labels) == 5.0
    with pytest.raises(ValueError):
        parse_rating("great", labels)


@pytest.mark.parametrize("text", ["", "great", "=1", "great=x", "great=nan"])
def test_parse_labels_rejects(text):
    with pytest.raises(ValueError):
        parse_labels(text)


def test_describe_rating():
    assert describe_rating(1.0) == "great"
    assert describe_rating(2.5) == "2.5"
    assert describe_rating(3.0, DEFAULT_LABELS) == "ok"
