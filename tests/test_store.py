import json
from datetime import datetime, timezone

import pytest

from errors import NotFoundError, ParseError
from fakes import liked
from providers.base import LikedItemRecord
from ratings.store import RatingEntry, RatingStore


def _dt(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return RatingStore(
        {
            "a": RatingEntry(added_at=_dt(2023, 1, 1), rating=2.0),
            "b": RatingEntry(added_at=_dt(2023, 6, 1, 12, 30), rating=1.0),
        }
    )


def test_save_then_load_round_trip(tmp_path, store):
    path = tmp_path / "ratings.json"
    store.save(path)
    assert RatingStore.load(path) == store


def test_on_disk_format(tmp_path, store):
    path = tmp_path / "ratings.json"
    store.save(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["b"] == {"added_at": "2023-06-01T12:30:00Z", "rating": 1.0}


def test_load_accepts_spotify_style_timestamps(tmp_path):
    path = tmp_path / "ratings.json"
    path.write_text(
        json.dumps({"x": {"added_at": "2021-03-04T05:06:07Z", "rating": 4}}),
        encoding="utf-8",
    )
    store = RatingStore.load(path)
    assert store["x"].added_at == _dt(2021, 3, 4, 5, 6, 7)
    assert store["x"].rating == 4.0


def test_load_missing_file_is_not_found(tmp_path):
    with pytest.raises(NotFoundError):
        RatingStore.load(tmp_path / "nope.json")


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        '{"x": {"rating": 3.0}}',
        '{"x": {"added_at": "yesterday", "rating": 3.0}}',
        '{"x": {"added_at": "2023-01-01T00:00:00Z", "rating": "high"}}',
        '{"x": {"added_at": "2023-01-01T00:00:00Z", "rating": Infinity}}',
    ],
)
def test_load_malformed_is_parse_error(tmp_path, content):
    path = tmp_path / "ratings.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ParseError):
        RatingStore.load(path)


def test_load_or_create_missing_is_empty(tmp_path):
    store = RatingStore.load_or_create(tmp_path / "nope.json")
    assert len(store) == 0


def test_load_or_create_does_not_hide_corruption(tmp_path):
    path = tmp_path / "ratings.json"
    path.write_text("{oops", encoding="utf-8")
    with pytest.raises(ParseError):
        RatingStore.load_or_create(path)


def test_save_creates_parents_and_leaves_no_temp_file(tmp_path, store):
    path = tmp_path / "nested" / "dir" / "ratings.json"
    store.save(path)
    assert path.exists()
    assert list(path.parent.iterdir()) == [path]


def test_merge_new_inserts_only_unseen(store):
    records = [
        LikedItemRecord("a", _dt(2024, 1, 1)),
        LikedItemRecord("c", _dt(2024, 2, 1)),
    ]

    inserted = store.merge_new(records, default_rating=3.0)

    assert inserted == 1
    assert store["a"].rating == 2.0
    assert store["a"].added_at == _dt(2023, 1, 1)
    assert store["c"] == RatingEntry(added_at=_dt(2024, 2, 1), rating=3.0)


def test_merge_new_is_idempotent():
    store = RatingStore()
    records = liked(5)

    assert store.merge_new(records) == 5
    assert store.merge_new(records) == 0
    assert len(store) == 5


def test_merge_new_uses_given_default():
    store = RatingStore()
    store.merge_new(liked(1), default_rating=2.5)
    assert store["t0"].rating == 2.5


def test_set_rating_returns_previous_and_keeps_added_at(store):
    previous = store.set_rating("a", 4.0)
    assert previous == 2.0
    assert store["a"] == RatingEntry(added_at=_dt(2023, 1, 1), rating=4.0)


def test_set_rating_unknown_id_leaves_file_untouched(tmp_path, store):
    path = tmp_path / "ratings.json"
    store.save(path)
    before = path.read_bytes()

    with pytest.raises(NotFoundError):
        store.set_rating("zzz", 1.0)

    assert "zzz" not in store
    assert path.read_bytes() == before


def test_nan_rating_rejected(store):
    with pytest.raises(ValueError):
        store.set_rating("a", float("nan"))
    with pytest.raises(ValueError):
        RatingEntry(added_at=_dt(2023, 1, 1), rating=float("nan"))


def test_bool_rating_rejected():
    with pytest.raises(ValueError):
        RatingEntry(added_at=_dt(2023, 1, 1), rating=True)
