"""UTC conversion helpers and the UTCDateTime column type."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from sqlalchemy.dialects import sqlite

from jti_store.db.time import UTCDateTime, to_epoch_millis, to_utc, utcnow

DIALECT = sqlite.dialect()


def test_utcnow_is_aware_utc() -> None:
    assert utcnow().utcoffset() == timedelta(0)


def test_to_utc_converts_offsets() -> None:
    value = datetime(2025, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_utc(value) == datetime(2025, 1, 1, tzinfo=UTC)
    assert to_utc(value).tzinfo is UTC


def test_to_utc_rejects_naive() -> None:
    with pytest.raises(ValueError):
        to_utc(datetime(2025, 1, 1))


def test_to_utc_rejects_non_datetime() -> None:
    with pytest.raises(TypeError):
        to_utc(1735689600)


def test_to_epoch_millis() -> None:
    assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 1, 2500, tzinfo=UTC)) == 1002


def test_bind_strips_to_naive_utc() -> None:
    bound = UTCDateTime().process_bind_param(
        datetime(2025, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=9))), DIALECT
    )
    assert bound == datetime(2025, 1, 1, 0, 0)
    assert bound.tzinfo is None


def test_result_is_marked_utc() -> None:
    loaded = UTCDateTime().process_result_value(datetime(2025, 1, 1), DIALECT)
    assert loaded == datetime(2025, 1, 1, tzinfo=UTC)


def test_aware_result_is_normalized() -> None:
    loaded = UTCDateTime().process_result_value(
        datetime(2025, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=1))), DIALECT
    )
    assert loaded == datetime(2025, 1, 1, tzinfo=UTC)
    assert loaded.tzinfo is UTC


def test_none_passes_through() -> None:
    column_type = UTCDateTime()
    assert column_type.process_bind_param(None, DIALECT) is None
    assert column_type.process_result_value(None, DIALECT) is None
