from __future__ import annotations

import pytest

from freightmatch.core.exceptions import ConflictError, NotFoundError, ValidationError
from freightmatch.models import AccountStatus, TransporterStatus
from freightmatch.services.transporter_service import TransporterService


@pytest.fixture
def transporters(session):
    return TransporterService(session)


def test_register_starts_pending(transporters):
    transporter = transporters.register_transporter({"phone_number": "+212 600-111-222", "name": "Atlas Trans"})
    assert transporter.phone_number == "+212600111222"
    assert transporter.status == TransporterStatus.PENDING
    assert transporter.is_eligible is False


def test_duplicate_phone_is_conflict(transporters):
    transporters.register_transporter({"phone_number": "+212600111222"})
    with pytest.raises(ConflictError):
        transporters.register_transporter({"phone_number": "+212 600111222"})


def test_invalid_phone_is_validation_error(transporters):
    with pytest.raises(ValidationError):
        transporters.register_transporter({"phone_number": "call-me-maybe"})


def test_validate_then_block_and_unblock(transporters):
    transporter = transporters.register_transporter({"phone_number": "+212600999000"})
    transporters.validate_transporter(transporter.id, actor_id="admin-1")
    assert transporter.is_eligible is True

    transporters.block_transporter(transporter.id)
    assert transporter.account_status == AccountStatus.BLOCKED
    assert transporter.is_eligible is False

    transporters.unblock_transporter(transporter.id)
    assert transporter.is_eligible is True


def test_list_by_status(transporters):
    pending = transporters.register_transporter({"phone_number": "+212600000001"})
    validated = transporters.register_transporter({"phone_number": "+212600000002"})
    transporters.validate_transporter(validated.id)
    assert [t.id for t in transporters.list_transporters(TransporterStatus.PENDING)] == [pending.id]
    assert len(transporters.list_transporters()) == 2


def test_unknown_transporter(transporters):
    with pytest.raises(NotFoundError):
        transporters.get_transporter("missing")


def test_record_activity(transporters):
    transporter = transporters.register_transporter({"phone_number": "+212600000003"})
    assert transporters.record_activity(transporter.id).last_active_at is not None
