"""status page initial schema

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19 10:12:41.301554

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "a1c3e5f7b9d2"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Los ENUM se comparten entre tablas: se crean una vez y las columnas los
# referencian con create_type=False.
service_status = postgresql.ENUM(
    "operational", "degraded", "partial_outage", "major_outage",
    name="service_status", create_type=False,
)
incident_status = postgresql.ENUM(
    "investigating", "identified", "monitoring", "resolved",
    name="incident_status", create_type=False,
)
incident_impact = postgresql.ENUM(
    "none", "minor", "major", "critical",
    name="incident_impact", create_type=False,
)
maintenance_status = postgresql.ENUM(
    "scheduled", "in_progress", "completed", "cancelled",
    name="maintenance_status", create_type=False,
)

_ENUMS = (service_status, incident_status, incident_impact, maintenance_status)


def _ts(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=nullable,
        server_default=None if nullable else sa.text("now()"),
    )


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for e in _ENUMS:
        e.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="admin"),
        _ts("created_at", nullable=True),
        _ts("updated_at", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", service_status, nullable=False, server_default="operational"),
        sa.Column("url", sa.String(length=500), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_visible", sa.Boolean(), nullable=False, server_default=sa.true()),
        _ts("created_at"),
        _ts("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "components",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", service_status, nullable=False, server_default="operational"),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_visible", sa.Boolean(), nullable=False, server_default=sa.true()),
        _ts("created_at"),
        _ts("updated_at"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_components_service_id"), "components", ["service_id"], unique=False)

    op.create_table(
        "service_status_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("status", service_status, nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        _ts("created_at"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_service_status_history_service_id"), "service_status_history", ["service_id"], unique=False
    )

    # --- incidents ---
    op.create_table(
        "incidents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", incident_status, nullable=False, server_default="investigating"),
        sa.Column("impact", incident_impact, nullable=False, server_default="minor"),
        _ts("created_at"),
        _ts("updated_at"),
        _ts("resolved_at", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "incident_updates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("incident_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", incident_status, nullable=False),
        _ts("created_at"),
        sa.ForeignKeyConstraint(["incident_id"], ["incidents.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_incident_updates_incident_id"), "incident_updates", ["incident_id"], unique=False)

    op.create_table(
        "incident_services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("incident_id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("impact", incident_impact, nullable=False, server_default="minor"),
        _ts("created_at"),
        sa.ForeignKeyConstraint(["incident_id"], ["incidents.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("incident_id", "service_id", name="uq_incident_service"),
    )
    op.create_index(op.f("ix_incident_services_incident_id"), "incident_services", ["incident_id"], unique=False)
    op.create_index(op.f("ix_incident_services_service_id"), "incident_services", ["service_id"], unique=False)

    op.create_table(
        "incident_components",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("incident_id", sa.Integer(), nullable=False),
        sa.Column("component_id", sa.Integer(), nullable=False),
        sa.Column("impact", incident_impact, nullable=False, server_default="minor"),
        _ts("created_at"),
        sa.ForeignKeyConstraint(["incident_id"], ["incidents.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["component_id"], ["components.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("incident_id", "component_id", name="uq_incident_component"),
    )
    op.create_index(op.f("ix_incident_components_incident_id"), "incident_components", ["incident_id"], unique=False)
    op.create_index(
        op.f("ix_incident_components_component_id"), "incident_components", ["component_id"], unique=False
    )

    # --- maintenance ---
    op.create_table(
        "scheduled_maintenance",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", maintenance_status, nullable=False, server_default="scheduled"),
        sa.Column("impact", incident_impact, nullable=False, server_default="minor"),
        sa.Column("scheduled_start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("scheduled_end_time", sa.DateTime(timezone=True), nullable=False),
        _ts("actual_start_time", nullable=True),
        _ts("actual_end_time", nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_scheduled_maintenance_scheduled_start_time"),
        "scheduled_maintenance",
        ["scheduled_start_time"],
        unique=False,
    )

    op.create_table(
        "maintenance_updates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("maintenance_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", maintenance_status, nullable=False),
        _ts("created_at"),
        sa.ForeignKeyConstraint(["maintenance_id"], ["scheduled_maintenance.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_maintenance_updates_maintenance_id"), "maintenance_updates", ["maintenance_id"], unique=False
    )

    op.create_table(
        "maintenance_services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("maintenance_id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("impact", incident_impact, nullable=False, server_default="minor"),
        _ts("created_at"),
        sa.ForeignKeyConstraint(["maintenance_id"], ["scheduled_maintenance.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("maintenance_id", "service_id", name="uq_maintenance_service"),
    )
    op.create_index(
        op.f("ix_maintenance_services_maintenance_id"), "maintenance_services", ["maintenance_id"], unique=False
    )
    op.create_index(op.f("ix_maintenance_services_service_id"), "maintenance_services", ["service_id"], unique=False)

    op.create_table(
        "maintenance_components",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("maintenance_id", sa.Integer(), nullable=False),
        sa.Column("component_id", sa.Integer(), nullable=False),
        sa.Column("impact", incident_impact, nullable=False, server_default="minor"),
        _ts("created_at"),
        sa.ForeignKeyConstraint(["maintenance_id"], ["scheduled_maintenance.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["component_id"], ["components.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("maintenance_id", "component_id", name="uq_maintenance_component"),
    )
    op.create_index(
        op.f("ix_maintenance_components_maintenance_id"), "maintenance_components", ["maintenance_id"], unique=False
    )
    op.create_index(
        op.f("ix_maintenance_components_component_id"), "maintenance_components", ["component_id"], unique=False
    )

    # --- settings ---
    op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(length=255), nullable=False),
        sa.Column("value", sa.Text(), nullable=False, server_default=""),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="string"),
        sa.Column("description", sa.Text(), nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_settings_key"), "settings", ["key"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_settings_key"), table_name="settings")
    op.drop_table("settings")
    op.drop_table("maintenance_components")
    op.drop_table("maintenance_services")
    op.drop_table("maintenance_updates")
    op.drop_table("scheduled_maintenance")
    op.drop_table("incident_components")
    op.drop_table("incident_services")
    op.drop_table("incident_updates")
    op.drop_table("incidents")
    op.drop_table("service_status_history")
    op.drop_table("components")
    op.drop_table("services")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for e in reversed(_ENUMS):
        e.drop(bind, checkfirst=True)
