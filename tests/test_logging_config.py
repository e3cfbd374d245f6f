import logging

from imagepost.logging_config import LOG_FORMAT, SafeFormatter, TraceIdFilter


def make_record():
    return logging.LogRecord("imagepost.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)


def test_filter_without_span_sets_placeholders():
    record = make_record()

    assert TraceIdFilter().filter(record) is True
    assert record.trace_id == "-"
    assert record.span_id == "-"


def test_safe_formatter_tolerates_missing_fields():
    output = SafeFormatter(LOG_FORMAT).format(make_record())

    assert "[trace=- span=-]" in output
    assert output.endswith("imagepost.test [trace=- span=-] - hello world")
