"""baseline freight marketplace schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "transporters",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("status", sa.String(40), nullable=False),
        sa.Column("account_status", sa.String(40), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2), nullable=False),
        sa.Column("total_ratings", sa.Integer(), nullable=False),
        sa.Column("total_trips", sa.Integer(), nullable=False),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("phone_number"),
    )
    op.create_index("idx_transporters_status_account", "transporters", ["status", "account_status"])

    op.create_table(
        "transport_requests",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("reference_id", sa.String(32), nullable=False),
        sa.Column("client_id", sa.String(36), nullable=False),
        sa.Column("from_city", sa.String(120), nullable=False),
        sa.Column("to_city", sa.String(120), nullable=False),
        sa.Column("from_address", sa.String(500), nullable=True),
        sa.Column("to_address", sa.String(500), nullable=True),
        sa.Column("goods_type", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("budget", sa.Numeric(12, 2), nullable=True),
        sa.Column("requested_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("handling_required", sa.Boolean(), nullable=False),
        sa.Column("departure_floor", sa.Integer(), nullable=True),
        sa.Column("departure_elevator", sa.Boolean(), nullable=True),
        sa.Column("arrival_floor", sa.Integer(), nullable=True),
        sa.Column("arrival_elevator", sa.Boolean(), nullable=True),
        sa.Column("status", sa.String(40), nullable=False),
        sa.Column("payment_status", sa.String(40), nullable=False),
        sa.Column("archive_reason", sa.String(40), nullable=True),
        sa.Column("qualified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_for_matching_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("transporter_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("platform_fee", sa.Numeric(12, 2), nullable=True),
        sa.Column("client_total", sa.Numeric(12, 2), nullable=True),
        sa.Column("priced_from_offer", sa.Boolean(), nullable=False),
        sa.Column("accepted_offer_id", sa.String(36), nullable=True),
        sa.Column("assigned_transporter_id", sa.String(36), nullable=True),
        sa.Column("assigned_by_id", sa.String(36), nullable=True),
        sa.Column("assigned_manually", sa.Boolean(), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("payment_receipt", sa.Text(), nullable=True),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_hidden", sa.Boolean(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["assigned_transporter_id"], ["transporters.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("reference_id"),
        sa.CheckConstraint(
            "accepted_offer_id IS NULL OR assigned_transporter_id IS NULL",
            name="ck_transport_requests_single_winner",
        ),
    )
    op.create_index("idx_transport_requests_status", "transport_requests", ["status"])
    op.create_index("idx_transport_requests_client", "transport_requests", ["client_id"])
    op.create_index("idx_transport_requests_payment_status", "transport_requests", ["payment_status"])

    op.create_table(
        "transporter_interests",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("request_id", sa.String(36), nullable=False),
        sa.Column("transporter_id", sa.String(36), nullable=False),
        sa.Column("availability_date", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["request_id"], ["transport_requests.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("request_id", "transporter_id", name="uq_interests_request_transporter"),
    )

    op.create_table(
        "request_declines",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("request_id", sa.String(36), nullable=False),
        sa.Column("transporter_id", sa.String(36), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["request_id"], ["transport_requests.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("request_id", "transporter_id", name="uq_declines_request_transporter"),
    )

    op.create_table(
        "offers",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("request_id", sa.String(36), nullable=False),
        sa.Column("transporter_id", sa.String(36), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("pickup_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("load_type", sa.String(40), nullable=False),
        sa.Column("status", sa.String(40), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["request_id"], ["transport_requests.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["transporter_id"], ["transporters.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("request_id", "transporter_id", name="uq_offers_request_transporter"),
    )
    op.create_index("idx_offers_request_status", "offers", ["request_id", "status"])

    op.create_table(
        "contracts",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("request_id", sa.String(36), nullable=True),
        sa.Column("reference_id", sa.String(32), nullable=False),
        sa.Column("offer_id", sa.String(36), nullable=True),
        sa.Column("client_id", sa.String(36), nullable=False),
        sa.Column("transporter_id", sa.String(36), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(40), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["request_id"], ["transport_requests.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["offer_id"], ["offers.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["transporter_id"], ["transporters.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_contracts_request", "contracts", ["request_id"])
    op.create_index("idx_contracts_transporter_status", "contracts", ["transporter_id", "status"])

    op.create_table(
        "ratings",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("contract_id", sa.String(36), nullable=False),
        sa.Column("request_id", sa.String(36), nullable=True),
        sa.Column("transporter_id", sa.String(36), nullable=False),
        sa.Column("client_id", sa.String(36), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["transporter_id"], ["transporters.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("contract_id"),
        sa.CheckConstraint("score BETWEEN 1 AND 5", name="ck_ratings_score_range"),
    )

    op.create_table(
        "empty_returns",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("transporter_id", sa.String(36), nullable=False),
        sa.Column("from_city", sa.String(120), nullable=False),
        sa.Column("to_city", sa.String(120), nullable=False),
        sa.Column("return_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(40), nullable=False),
        sa.Column("assigned_request_id", sa.String(36), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["transporter_id"], ["transporters.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_empty_returns_route_status", "empty_returns", ["from_city", "to_city", "status"])

    op.create_table(
        "request_events",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("request_id", sa.String(36), nullable=False),
        sa.Column("event_type", sa.String(80), nullable=False),
        sa.Column("actor_id", sa.String(36), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["request_id"], ["transport_requests.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_request_events_request_type", "request_events", ["request_id", "event_type"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("type", sa.String(60), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("related_id", sa.String(36), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_notifications_user_read", "notifications", ["user_id", "read"])

    op.create_table(
        "platform_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("commission_percentage", sa.Numeric(5, 2), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("platform_settings")
    op.drop_index("idx_notifications_user_read", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_request_events_request_type", table_name="request_events")
    op.drop_table("request_events")
    op.drop_index("idx_empty_returns_route_status", table_name="empty_returns")
    op.drop_table("empty_returns")
    op.drop_table("ratings")
    op.drop_index("idx_contracts_transporter_status", table_name="contracts")
    op.drop_index("idx_contracts_request", table_name="contracts")
    op.drop_table("contracts")
    op.drop_index("idx_offers_request_status", table_name="offers")
    op.drop_table("offers")
    op.drop_table("request_declines")
    op.drop_table("transporter_interests")
    op.drop_index("idx_transport_requests_payment_status", table_name="transport_requests")
    op.drop_index("idx_transport_requests_client", table_name="transport_requests")
    op.drop_index("idx_transport_requests_status", table_name="transport_requests")
    op.drop_table("transport_requests")
    op.drop_index("idx_transporters_status_account", table_name="transporters")
    op.drop_table("transporters")
