from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="storage.record_store",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Loaded air quality records",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extra_keys() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    text = formatter.format(_record(record_count=3, source="data.txt", unrelated="x"))

    assert text == "Loaded air quality records | source=data.txt record_count=3"


def test_formatter_skips_missing_and_none_values() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=("intent", "detector"))

    text = formatter.format(_record(intent=None))

    assert text == "Loaded air quality records"
