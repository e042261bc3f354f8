import time

from filestats.format import format_count, format_size, format_time


def test_format_size_small_exact():
    assert format_size(0) == "0 bytes"
    assert format_size(1) == "1 byte"
    assert format_size(999) == "999 bytes"


def test_format_size_units():
    assert format_size(1000) == "1.0 kB"
    assert format_size(1536) == "1.5 kB"
    assert format_size(5 * 1024**2) == "5.0 MB"
    assert format_size(3 * 1024**3, precision=2) == "3.00 GB"
    # Stays within three digits before the decimal point
    assert format_size(999 * 1024) == "999.0 kB"
    assert format_size(1000 * 1024) == "1.0 MB"


def test_format_count():
    assert format_count(0) == "0"
    assert format_count(1234567) == "1,234,567"


def test_format_time():
    assert format_time(0) == ""
    ts = 1_700_000_000
    assert format_time(ts) == time.strftime("%Y-%m-%d %H:%M", time.localtime(ts))
