from datetime import datetime, timedelta, timezone

from linkup.core.recency import as_utc, format_short_date, group_by_recency

NOW = datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)


def _item(label: str, stamp: datetime) -> dict:
    return {"label": label, "at": stamp}


def test_items_split_into_day_buckets_newest_first() -> None:
    items = [
        _item("this-morning", NOW.replace(hour=8)),
        _item("just-now", NOW - timedelta(minutes=1)),
        _item("yesterday-late", NOW.replace(hour=23, minute=59) - timedelta(days=1)),
        _item("last-week", NOW - timedelta(days=7)),
        _item("two-days", NOW - timedelta(days=2)),
    ]

    grouped = group_by_recency(items, key=lambda i: i["at"], now=NOW)

    assert [i["label"] for i in grouped["today"]] == ["just-now", "this-morning"]
    assert [i["label"] for i in grouped["yesterday"]] == ["yesterday-late"]
    assert [i["label"] for i in grouped["older"]] == ["two-days", "last-week"]
    assert grouped["count"] == 5


def test_only_older_items_get_a_display_date() -> None:
    items = [_item("today", NOW), _item("old", datetime(2026, 10, 3, 9, 0, tzinfo=timezone.utc))]

    grouped = group_by_recency(items, key=lambda i: i["at"], now=NOW)

    assert "formatted_date" not in grouped["today"][0]
    assert grouped["older"][0]["formatted_date"] == "3 Oct"


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = datetime(2026, 10, 19, 0, 5)
    assert as_utc(naive) == datetime(2026, 10, 19, 0, 5, tzinfo=timezone.utc)

    grouped = group_by_recency([_item("naive", naive)], key=lambda i: i["at"], now=NOW)
    assert len(grouped["today"]) == 1


def test_empty_input() -> None:
    assert group_by_recency([], key=lambda i: i["at"], now=NOW) == {
        "today": [],
        "yesterday": [],
        "older": [],
        "count": 0,
    }


def test_format_short_date() -> None:
    assert format_short_date(datetime(2026, 1, 9, tzinfo=timezone.utc)) == "9 Jan"
