from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest

from freightmatch.core.exceptions import ValidationError
from freightmatch.schemas.requests import RequestCreateRequest
from freightmatch.utils.dates import same_calendar_day, to_utc
from freightmatch.utils.ids import new_reference_id
from freightmatch.utils.validators import sanitize_text, validate_payload
from tests.factories import request_payload


def test_sanitize_text_strips_nulls_and_whitespace():
    assert sanitize_text("  rec\x00eipt  ") == "receipt"
    assert sanitize_text(None) == ""
    assert sanitize_text("abcdef", max_len=3) == "abc"


def test_validate_payload_reports_field_location():
    with pytest.raises(ValidationError, match="description"):
        validate_payload(RequestCreateRequest, request_payload(description="too short"))


def test_validate_payload_passes_models_through():
    model = RequestCreateRequest(**request_payload())
    assert validate_payload(RequestCreateRequest, model) is model


def test_reference_id_format():
    reference = new_reference_id(datetime(2026, 3, 1, tzinfo=timezone.utc))
    assert re.fullmatch(r"CMD-2026-\d{5}", reference)


def test_naive_datetimes_are_read_as_utc():
    naive = datetime(2026, 10, 19, 23, 30)
    assert to_utc(naive).tzinfo is timezone.utc
    assert same_calendar_day(naive, datetime(2026, 10, 19, 1, 0, tzinfo=timezone.utc))
    assert not same_calendar_day(None, naive)
