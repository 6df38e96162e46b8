from datetime import datetime, timedelta, timezone

from dhcpleases.timestamps import format_timestamp, parse_timestamp, weekday_digit


def test_parse_timestamp_without_zone_is_utc():
    parsed = parse_timestamp("6 2019/04/27 03:34:45")
    assert parsed == datetime(2019, 4, 27, 3, 34, 45, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(0)


def test_parse_timestamp_mdt_matches_denver_summer_offset():
    parsed = parse_timestamp("6 2019/04/27 03:34:45 MDT")
    expected = datetime(2019, 4, 27, 3, 34, 45, tzinfo=timezone(timedelta(hours=-6)))
    assert parsed == expected
    assert parsed == datetime(2019, 4, 27, 9, 34, 45, tzinfo=timezone.utc)


def test_parse_timestamp_numeric_offset_wins_over_abbreviation():
    parsed = parse_timestamp("6 2019/04/27 03:34:45 +0000 MST")
    assert parsed == datetime(2019, 4, 27, 3, 34, 45, tzinfo=timezone.utc)
    assert parse_timestamp("6 2019/04/27 03:34:45 -0130") == datetime(
        2019, 4, 27, 5, 4, 45, tzinfo=timezone.utc
    )


def test_parse_timestamp_ignores_weekday_value():
    # the weekday digit is positional only, even when it disagrees with the date
    assert parse_timestamp("0 2019/04/27 03:34:45") == parse_timestamp("6 2019/04/27 03:34:45")
    assert parse_timestamp("x 2019/04/27 03:34:45") is not None


def test_parse_timestamp_unknown_zone_reads_as_utc():
    parsed = parse_timestamp("6 2019/04/27 03:34:45 QQQ")
    assert parsed == datetime(2019, 4, 27, 3, 34, 45, tzinfo=timezone.utc)


def test_parse_timestamp_custom_zone_table():
    parsed = parse_timestamp("6 2019/04/27 03:34:45 SAST", zones={"SAST": 120})
    assert parsed == datetime(2019, 4, 27, 1, 34, 45, tzinfo=timezone.utc)


def test_parse_timestamp_malformed_values_are_unset():
    malformed = [
        "never",
        "",
        "6",
        "62019/04/27 03:34:45",
        "6 2019/13/27 03:34:45",
        "6 2019/04/27",
        "6 2019-04-27 03:34:45",
        "epoch 1556335485",
    ]
    for value in malformed:
        assert parse_timestamp(value) is None, value


def test_format_timestamp_round_trips_to_same_instant():
    original = parse_timestamp("6 2019/04/27 03:34:45 MDT")
    text = format_timestamp(original)
    assert text == "6 2019/04/27 09:34:45"
    assert parse_timestamp(text) == original


def test_weekday_digit_counts_from_sunday():
    assert weekday_digit(datetime(2019, 4, 27)) == 6  # Saturday
    assert weekday_digit(datetime(2019, 4, 28)) == 0  # Sunday
    assert format_timestamp(datetime(2019, 4, 28, tzinfo=timezone.utc), weekday=4).startswith("4 ")


def test_parse_timestamp_offset_without_zone_name():
    parsed = parse_timestamp("6 2019/04/27 03:24:45 +0200")
    assert parsed.utcoffset() == timedelta(hours=2)
    assert parsed == datetime(2019, 4, 27, 1, 24, 45, tzinfo=timezone.utc)


def test_parse_timestamp_impossible_offset_is_unset():
    assert parse_timestamp("6 2019/04/27 03:24:45 +9900") is None
    assert parse_timestamp("6 2019/04/27 03:24:45 BIG", zones={"BIG": 5000}) is None
