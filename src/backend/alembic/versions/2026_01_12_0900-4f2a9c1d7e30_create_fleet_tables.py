"""create_fleet_tables

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-01-12 09:00:00.000000+00:00

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4f2a9c1d7e30"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    """Create customers, devices, tickets, telemetry, events and analytics tables"""
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("contact", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("support_level", sa.String(length=20), nullable=False),
        sa.Column("device_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("contract_start", sa.DateTime(), nullable=True),
        sa.Column("contract_end", sa.DateTime(), nullable=True),
        sa.Column(
            "account_manager",
            sa.String(length=200),
            nullable=False,
            server_default=sa.text("'Unassigned'"),
        ),
        sa.Column("status", sa.String(length=20), nullable=False, server_default=sa.text("'ACTIVE'")),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("customer_id"),
    )
    op.create_index("ix_customers_support_level", "customers", ["support_level"])
    op.create_index("ix_customers_status", "customers", ["status"])
    op.create_index("ix_customers_name", "customers", ["name"])

    op.create_table(
        "devices",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("device_id", sa.String(length=50), nullable=False),
        sa.Column("customer_id", sa.String(length=50), nullable=False),
        sa.Column("device_name", sa.String(length=255), nullable=False),
        sa.Column("device_brand", sa.String(length=100), nullable=False),
        sa.Column("device_manufacturer", sa.String(length=100), nullable=True),
        sa.Column("device_family", sa.String(length=100), nullable=True),
        sa.Column("device_modeltype", sa.String(length=100), nullable=True),
        sa.Column("device_subbrand", sa.String(length=100), nullable=True),
        sa.Column("device_bios_version", sa.String(length=100), nullable=True),
        sa.Column("device_purchase_date", sa.DateTime(), nullable=True),
        sa.Column("os_name", sa.String(length=100), nullable=True),
        sa.Column("os_version", sa.String(length=50), nullable=True),
        sa.Column("os_language", sa.String(length=20), nullable=True),
        sa.Column("os_country", sa.String(length=50), nullable=True),
        sa.Column("udc_channel", sa.String(length=100), nullable=True),
        sa.Column("health_score", sa.Integer(), nullable=False, server_default=sa.text("100")),
        sa.Column("risk_level", sa.String(length=10), nullable=False, server_default=sa.text("'LOW'")),
        sa.Column("last_seen", sa.DateTime(), nullable=True),
        sa.Column("warranty_status", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("warranty_expiry_date", sa.DateTime(), nullable=True),
        sa.Column("temperature", sa.Float(), nullable=True),
        sa.Column("cpu_usage", sa.Float(), nullable=True),
        sa.Column("memory_usage", sa.Float(), nullable=True),
        sa.Column("disk_usage", sa.Float(), nullable=True),
        sa.Column("power_consumption", sa.Float(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.customer_id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("device_id"),
    )
    op.create_index("ix_devices_customer_id", "devices", ["customer_id"])
    op.create_index("ix_devices_risk_level", "devices", ["risk_level"])
    op.create_index("ix_devices_health_score", "devices", ["health_score"])
    op.create_index("ix_devices_brand", "devices", ["device_brand"])
    op.create_index("ix_devices_last_seen", "devices", ["last_seen"])

    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ticket_id", sa.String(length=50), nullable=False),
        sa.Column("device_id", sa.String(length=50), nullable=False),
        sa.Column("customer_id", sa.String(length=50), nullable=False),
        sa.Column("issue", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("status", sa.String(length=20), nullable=False, server_default=sa.text("'ANALYSIS'")),
        sa.Column("priority", sa.String(length=10), nullable=False),
        sa.Column("confidence", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("warranty", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("assigned_to", sa.String(length=200), nullable=True),
        sa.Column("estimated_resolution", sa.DateTime(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["device_id"], ["devices.device_id"]),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.customer_id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ticket_id"),
    )
    op.create_index("ix_tickets_device_id", "tickets", ["device_id"])
    op.create_index("ix_tickets_customer_id", "tickets", ["customer_id"])
    op.create_index("ix_tickets_status", "tickets", ["status"])
    op.create_index("ix_tickets_priority", "tickets", ["priority"])
    op.create_index("ix_tickets_created_at", "tickets", ["created_at"])

    op.create_table(
        "ticket_telemetry",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ticket_id", sa.String(length=50), nullable=False),
        sa.Column("read_error_rate", sa.Float(), nullable=True),
        sa.Column("temperature", sa.Float(), nullable=True),
        sa.Column("reallocated_sectors", sa.Integer(), nullable=True),
        sa.Column("spin_retry_count", sa.Integer(), nullable=True),
        sa.Column("power_on_hours", sa.Integer(), nullable=True),
        sa.Column("smart_status", sa.String(length=50), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["ticket_id"], ["tickets.ticket_id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ticket_id"),
    )

    op.create_table(
        "telemetry_data",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("device_id", sa.String(length=50), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("temperature", sa.Float(), nullable=True),
        sa.Column("cpu_usage", sa.Float(), nullable=True),
        sa.Column("memory_usage", sa.Float(), nullable=True),
        sa.Column("disk_usage", sa.Float(), nullable=True),
        sa.Column("power_consumption", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(["device_id"], ["devices.device_id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_telemetry_data_device_timestamp",
        "telemetry_data",
        ["device_id", "timestamp"],
    )

    op.create_table(
        "system_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.String(length=500), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("severity", sa.String(length=10), nullable=False),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_system_events_type", "system_events", ["type"])
    op.create_index("ix_system_events_created_at", "system_events", ["created_at"])

    op.create_table(
        "analytics",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("total_devices", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("devices_online", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("devices_offline", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("high_risk_devices", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("medium_risk_devices", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("low_risk_devices", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_tickets", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("open_tickets", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("resolved_tickets", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("avg_response_time", sa.Float(), nullable=True),
        sa.Column("avg_resolution_time", sa.Float(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date"),
    )


def downgrade() -> None:
    """Drop all fleet tables"""
    op.drop_table("analytics")
    op.drop_index("ix_system_events_created_at", table_name="system_events")
    op.drop_index("ix_system_events_type", table_name="system_events")
    op.drop_table("system_events")
    op.drop_index("ix_telemetry_data_device_timestamp", table_name="telemetry_data")
    op.drop_table("telemetry_data")
    op.drop_table("ticket_telemetry")
    for index in (
        "ix_tickets_created_at",
        "ix_tickets_priority",
        "ix_tickets_status",
        "ix_tickets_customer_id",
        "ix_tickets_device_id",
    ):
        op.drop_index(index, table_name="tickets")
    op.drop_table("tickets")
    for index in (
        "ix_devices_last_seen",
        "ix_devices_brand",
        "ix_devices_health_score",
        "ix_devices_risk_level",
        "ix_devices_customer_id",
    ):
        op.drop_index(index, table_name="devices")
    op.drop_table("devices")
    op.drop_index("ix_customers_name", table_name="customers")
    op.drop_index("ix_customers_status", table_name="customers")
    op.drop_index("ix_customers_support_level", table_name="customers")
    op.drop_table("customers")
