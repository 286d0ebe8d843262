from datetime import date, datetime, timedelta, timezone

import pytest

from talklist.collections import (
    InvalidPrefixError,
    MissingAttributeError,
    TalkCollection,
    TalkView,
    all_under,
    date_sort_key,
    matches_prefix,
)
from talklist.content import ContentRecord


class FakeRecord:
    def __init__(self, path, **metadata):
        self.path = path
        self.metadata = metadata


def test_all_under_keeps_matching_records_in_order():
    records = [
        FakeRecord("/talks/b", title="B"),
        FakeRecord("/about", title="About"),
        FakeRecord("/talks/a", title="A"),
        FakeRecord("/talks/c", title="C"),
    ]
    talks = all_under(records, "/talks")
    assert [t.url for t in talks] == ["/talks/b", "/talks/a", "/talks/c"]
    assert [t.title for t in talks] == ["B", "A", "C"]


def test_all_under_is_segment_aware():
    records = [FakeRecord("/talks/a"), FakeRecord("/talksxyz"), FakeRecord("/about")]
    assert [t.url for t in all_under(records, "/talks")] == ["/talks/a"]


def test_prefix_itself_and_trailing_slash():
    records = [FakeRecord("/talks"), FakeRecord("/talks/"), FakeRecord("/talks/x/")]
    assert [t.url for t in all_under(records, "/talks")] == ["/talks", "/talks/", "/talks/x/"]
    assert [t.url for t in all_under(records, "/talks/")] == ["/talks", "/talks/", "/talks/x/"]


def test_matches_prefix_rules():
    assert matches_prefix("/anything", "/")
    assert matches_prefix("/", "/")
    assert not matches_prefix("/Talks/a", "/talks")
    assert not matches_prefix("/talksarchive", "/talks")
    assert matches_prefix("/talks/2024/pycon/", "/talks/2024")


def test_all_under_empty_input():
    assert all_under([], "/talks") == []


def test_all_under_accepts_generators():
    records = (FakeRecord(p) for p in ["/talks/a", "/x"])
    assert [t.url for t in all_under(records, "/talks")] == ["/talks/a"]


def test_all_under_is_idempotent_and_wraps_once():
    records = [FakeRecord("/talks/a", title="A"), FakeRecord("/talks/b", title="B")]
    first = all_under(records, "/talks")
    second = all_under(records, "/talks")
    assert [(t.url, t.title) for t in first] == [(t.url, t.title) for t in second]
    assert first == second
    assert len({id(t.record) for t in first}) == len(first)


def test_all_under_does_not_mutate_records():
    record = FakeRecord("/talks/a", title="A")
    records = [record]
    all_under(records, "/talks")
    assert records == [record]
    assert record.metadata == {"title": "A"}


@pytest.mark.parametrize(
    "prefix", ["", "talks", "talks/", "/../escaped", "/talks/../../x", "/talks/."]
)
def test_invalid_prefix(prefix):
    with pytest.raises(InvalidPrefixError):
        all_under([FakeRecord("/talks/a")], prefix)


def test_invalid_prefix_is_value_error():
    with pytest.raises(ValueError):
        all_under([], "")


def test_title_passthrough_is_exact():
    title = "  Scaling Python: <lessons> & more  "
    view = TalkView(FakeRecord("/talks/a", title=title))
    assert view.title is title


def test_missing_title_is_kept_but_raises_on_access():
    talks = all_under([FakeRecord("/talks/untitled")], "/talks")
    assert len(talks) == 1
    with pytest.raises(MissingAttributeError) as info:
        talks[0].title
    assert info.value.path == "/talks/untitled"
    assert info.value.key == "title"
    assert "/talks/untitled" in str(info.value)


def test_missing_attribute_is_not_attribute_error():
    view = TalkView(FakeRecord("/talks/a"))
    with pytest.raises(MissingAttributeError):
        getattr(view, "title", "fallback")


def test_declared_accessors_and_get():
    view = TalkView(FakeRecord("/talks/a", title="A", event="PyCon", date=date(2024, 5, 17)))
    assert view.event == "PyCon"
    assert view.date == date(2024, 5, 17)
    assert view.get("slides") is None
    assert view.get("slides", "n/a") == "n/a"
    assert view.get("event") == "PyCon"
    with pytest.raises(MissingAttributeError):
        TalkView(FakeRecord("/talks/b")).event


def test_talk_view_is_read_only():
    record = FakeRecord("/talks/a", title="A")
    view = TalkView(record)
    assert view.record is record
    with pytest.raises(AttributeError):
        view.title = "B"
    with pytest.raises(AttributeError):
        view.extra = 1


def test_talk_view_over_content_record():
    record = ContentRecord(path="/talks/a/", metadata={"title": "A"})
    view = TalkView(record)
    assert view.url == "/talks/a/"
    assert view.title == "A"


def test_talk_collection_helpers():
    talks = TalkCollection.from_records(
        [
            FakeRecord("/talks/a", title="A", event="PyCon", date=date(2023, 4, 1)),
            FakeRecord("/talks/b", title="B", event="EuroPython", date=date(2024, 7, 1)),
            FakeRecord("/talks/c", title="C", event="PyCon", date=date(2024, 5, 1)),
            FakeRecord("/blog/d", title="D"),
        ],
        "/talks",
    )
    assert len(talks) == 3
    assert talks.urls() == ["/talks/a", "/talks/b", "/talks/c"]
    assert [t.title for t in talks.with_event("PyCon")] == ["A", "C"]
    assert [t.title for t in talks.sorted()] == ["B", "C", "A"]
    assert [t.title for t in talks.sorted(reverse=False)] == ["A", "C", "B"]
    latest = talks.latest(2)
    assert isinstance(latest, TalkCollection)
    assert [t.title for t in latest] == ["B", "C"]
    assert talks[0].title == "A"


def test_sorting_is_stable_for_equal_dates():
    same = date(2024, 1, 1)
    talks = TalkCollection.from_records(
        [FakeRecord(f"/talks/{n}", title=n, date=same) for n in ["x", "y", "z"]],
        "/talks",
    )
    assert [t.title for t in talks.sorted()] == ["x", "y", "z"]


def test_sorting_undated_talk_raises():
    talks = TalkCollection.from_records(
        [FakeRecord("/talks/a", date=date(2024, 1, 1)), FakeRecord("/talks/b")],
        "/talks",
    )
    with pytest.raises(MissingAttributeError) as info:
        talks.sorted()
    assert info.value.path == "/talks/b"


def test_date_sort_key_puts_dates_and_datetimes_on_one_timeline():
    assert date_sort_key(date(2024, 5, 17)) == datetime(2024, 5, 17)
    assert date_sort_key(datetime(2024, 5, 18, 10)) == datetime(2024, 5, 18, 10)
    aware = datetime(2024, 5, 18, 12, tzinfo=timezone(timedelta(hours=2)))
    assert date_sort_key(aware) == datetime(2024, 5, 18, 10)
    assert date_sort_key("2024") == "2024"


def test_sorting_mixes_dates_and_datetimes():
    talks = TalkCollection.from_records(
        [
            FakeRecord("/talks/a", title="A", date=date(2024, 5, 17)),
            FakeRecord("/talks/b", title="B", date=datetime(2024, 5, 18, 10, 0)),
            FakeRecord("/talks/c", title="C", date=datetime(2024, 5, 17, 9, 30)),
        ],
        "/talks",
    )
    assert [t.title for t in talks.sorted()] == ["B", "C", "A"]
    assert [t.title for t in talks.sorted(reverse=False)] == ["A", "C", "B"]
