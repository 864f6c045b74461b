"""Text helpers: measurement, grapheme-aware wrapping and the stat formatters."""
import datetime

from repocard.text import (
    AVERAGE_CHAR_WIDTH,
    format_age,
    grapheme_len,
    graphemes,
    k_formatter,
    measure_text,
    truncate_text,
    wrap_text_multiline,
    xml_safe,
)

NOW = datetime.datetime(2024, 2, 5, tzinfo=datetime.timezone.utc)


def test_wrap_short_text_single_line():
    assert wrap_text_multiline("Hello world") == ["Hello world"]


def test_wrap_truncates_last_line_with_ellipsis():
    text = " ".join(["abcdefghi"] * 20)  # 199 chars, needs 4 lines of 59
    lines = wrap_text_multiline(text, 59, 3)
    assert len(lines) == 3
    assert lines[-1].endswith("...")
    assert not any(line.endswith("...") for line in lines[:-1])
    assert all(grapheme_len(line) <= 59 for line in lines)


def test_wrap_respects_max_lines():
    text = " ".join(["word"] * 200)
    for n in (1, 2, 3):
        assert len(wrap_text_multiline(text, 20, n)) == n


def test_wrap_keeps_oversized_token_whole():
    long_word = "a" * 70
    assert wrap_text_multiline(long_word + " b", 59, 3) == [long_word, "b"]


def test_wrap_counts_clusters_not_code_points():
    accented = "e\u0301" * 30  # 30 clusters, 60 code points
    lines = wrap_text_multiline(accented + " " + accented, 61, 3)
    assert lines == [accented + " " + accented]


FAMILY = "\U0001f468\u200d\U0001f469\u200d\U0001f467"


def test_ellipsis_never_splits_a_cluster():
    kept = wrap_text_multiline("ab" + FAMILY + "cdefgh yy", 10, 1)
    assert kept == ["ab" + FAMILY + "cdef..."]

    # the cut lands on the ZWJ sequence: it is dropped whole
    dropped = wrap_text_multiline("abcdefg" + FAMILY + " yy", 10, 1)
    assert dropped == ["abcdefg..."]

    flag = "\U0001f1fa\U0001f1f8"
    flagged = wrap_text_multiline("abcdef" + flag + flag + " yy", 10, 1)
    assert flagged == ["abcdef" + flag + "..."]
    assert grapheme_len(flagged[0]) <= 10


def test_wrap_splits_on_full_width_comma():
    assert wrap_text_multiline("前端，后端，数据库") == ["前端", "后端", "数据库"]


def test_wrap_empty():
    assert wrap_text_multiline("") == []


def test_graphemes_clusters():
    assert len(graphemes("e\u0301")) == 1
    assert len(graphemes("\U0001f1fa\U0001f1f8")) == 1
    assert len(graphemes("\U0001f1fa\U0001f1f8\U0001f1e9\U0001f1ea")) == 2
    assert len(graphemes("\U0001f468\u200d\U0001f469\u200d\U0001f467")) == 1
    assert len(graphemes("\U0001f44d\U0001f3fd")) == 1
    assert graphemes("abc") == ["a", "b", "c"]


def test_truncate_text():
    assert truncate_text("short", 35) == "short"
    assert truncate_text("x" * 40, 35) == "x" * 35 + "..."


def test_measure_monotonic():
    sample = "Hello, wörld! 123 \U0001f600 WWW iii"
    widths = [measure_text(sample[:i], 12) for i in range(len(sample) + 1)]
    assert widths == sorted(widths)


def test_measure_unknown_char_uses_average():
    assert measure_text("\u20ac", 10) == AVERAGE_CHAR_WIDTH * 10
    assert measure_text("") == 0


def test_k_formatter():
    assert k_formatter(0) == "0"
    assert k_formatter(999) == "999"
    assert k_formatter(1000) == "1k"
    assert k_formatter(1500) == "1.5k"
    assert k_formatter(2000000) == "2M"
    assert k_formatter(999999) == "1M"
    assert k_formatter(-1500) == "-1.5k"


def test_format_age_units():
    assert format_age("2023-01-01T00:00:00Z", NOW) == "1y"  # 400 days
    assert format_age("2023-11-01T00:00:00Z", NOW) == "3mo"
    assert format_age("2024-01-31T00:00:00Z", NOW) == "5d"
    assert format_age("2024-02-04T22:00:00Z", NOW) == "2h"
    assert format_age("2024-02-04T23:50:00Z", NOW) == "10m"
    assert format_age("2024-02-04T23:59:30Z", NOW) == "30s"


def test_format_age_uses_fixed_length_units():
    leap_day = datetime.datetime(2024, 2, 29, tzinfo=datetime.timezone.utc)
    year_ago = leap_day - datetime.timedelta(days=365)
    assert format_age(year_ago.isoformat(), leap_day) == "1y"
    assert format_age("2023-02-01T00:00:00Z", datetime.datetime(2023, 3, 1, tzinfo=datetime.timezone.utc)) == "28d"
    assert format_age("2023-01-01T00:00:00Z", datetime.datetime(2023, 1, 31, tzinfo=datetime.timezone.utc)) == "1mo"


def test_format_age_future_and_missing():
    assert format_age("2030-01-01T00:00:00Z", NOW) == "0s"
    assert format_age(None, NOW) == ""
    assert format_age("not a date", NOW) == ""


def test_format_age_naive_timestamp_is_utc():
    assert format_age("2024-01-31T00:00:00", NOW) == "5d"


def test_xml_safe_drops_control_chars():
    assert xml_safe("a\x00b\x1fc\td") == "abc\td"
