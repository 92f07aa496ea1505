from __future__ import annotations

from pathlib import Path

import freightmatch.models  # noqa: F401
from freightmatch.models import Base

EXPECTED_TABLES = {
    "transport_requests",
    "transporters",
    "transporter_interests",
    "request_declines",
    "offers",
    "contracts",
    "empty_returns",
    "ratings",
    "request_events",
    "notifications",
    "platform_settings",
}


def test_model_metadata_contains_target_tables():
    assert EXPECTED_TABLES.issubset(set(Base.metadata.tables.keys()))


def test_request_table_carries_version_and_single_winner_check():
    table = Base.metadata.tables["transport_requests"]
    assert "version" in table.columns
    names = {constraint.name for constraint in table.constraints}
    assert "ck_transport_requests_single_winner" in names


def test_pair_tables_are_unique_per_request_and_transporter():
    for name in ("transporter_interests", "request_declines", "offers"):
        table = Base.metadata.tables[name]
        unique_sets = [
            {column.name for column in constraint.columns}
            for constraint in table.constraints
            if constraint.__class__.__name__ == "UniqueConstraint"
        ]
        assert {"request_id", "transporter_id"} in unique_sets


def test_baseline_migration_creates_every_table():
    content = "".join(path.read_text(encoding="utf-8") for path in Path("migrations/versions").glob("*.py"))
    for table in EXPECTED_TABLES:
        assert f'"{table}"' in content
