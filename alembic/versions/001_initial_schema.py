"""Initial schema - users, locations, services, availability, bookings

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-06-01 00:00:00.000000

Bookings reference their slot directly through availability_id; the
UNIQUE constraint keeps one booking per slot.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="customer"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("role IN ('customer', 'provider')", name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "locations",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "services",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("provider_id", sa.String(26), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("location_id", sa.String(26), sa.ForeignKey("locations.id"), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_services_provider_id", "services", ["provider_id"])

    op.create_table(
        "availability",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("service_id", sa.String(26), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("provider_id", sa.String(26), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("start_time < end_time", name="ck_availability_time_order"),
    )
    op.create_index("ix_availability_provider_id", "availability", ["provider_id"])
    op.create_index("idx_availability_service_date", "availability", ["service_id", "date"])
    op.create_index("idx_availability_open_date", "availability", ["is_available", "date"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("customer_id", sa.String(26), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("service_id", sa.String(26), sa.ForeignKey("services.id"), nullable=False),
        sa.Column(
            "availability_id",
            sa.String(26),
            sa.ForeignKey("availability.id", ondelete="SET NULL"),
            nullable=True,
            unique=True,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"])
    op.create_index("idx_bookings_service_date", "bookings", ["service_id", "date"])


def downgrade() -> None:
    op.drop_index("idx_bookings_service_date", table_name="bookings")
    op.drop_index("ix_bookings_customer_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("idx_availability_open_date", table_name="availability")
    op.drop_index("idx_availability_service_date", table_name="availability")
    op.drop_index("ix_availability_provider_id", table_name="availability")
    op.drop_table("availability")
    op.drop_index("ix_services_provider_id", table_name="services")
    op.drop_table("services")
    op.drop_table("locations")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
