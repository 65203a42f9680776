"""Reservation ledger: restaurants, restaurant_tables, reservations, waitlist_entries.

On PostgreSQL, reservations also get an exclusion constraint: no two active (pending/confirmed)
rows on the same table_id may have overlapping [start_time, end_time). Needs btree_gist for the
integer equality part of the GiST index.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "restaurants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("open_time", sa.String(5), nullable=False),
        sa.Column("close_time", sa.String(5), nullable=False),
        sa.Column("total_tables", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("peak_hour_start", sa.String(5), nullable=True),
        sa.Column("peak_hour_end", sa.String(5), nullable=True),
        sa.Column("max_peak_duration_minutes", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "restaurant_tables",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("table_number", sa.String(32), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("restaurant_id", "table_number", name="uq_restaurant_tables_restaurant_number"),
        sa.CheckConstraint("capacity > 0", name="ck_restaurant_tables_capacity_positive"),
    )
    op.create_index("ix_restaurant_tables_restaurant_id", "restaurant_tables", ["restaurant_id"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("table_id", sa.Integer(), sa.ForeignKey("restaurant_tables.id"), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("party_size", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("notified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("start_time < end_time", name="ck_reservations_window"),
    )
    op.create_index("ix_reservations_restaurant_id", "reservations", ["restaurant_id"])
    op.create_index("ix_reservations_table_id", "reservations", ["table_id"])
    op.create_index("ix_reservations_table_window", "reservations", ["table_id", "start_time", "end_time"])
    op.create_index("ix_reservations_restaurant_start", "reservations", ["restaurant_id", "start_time"])

    op.create_table(
        "waitlist_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("party_size", sa.Integer(), nullable=False),
        sa.Column("preferred_date", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_waitlist_entries_restaurant_id", "waitlist_entries", ["restaurant_id"])
    op.create_index("ix_waitlist_entries_restaurant_date", "waitlist_entries", ["restaurant_id", "preferred_date"])

    if op.get_bind().dialect.name == "postgresql":
        op.execute(sa.text("CREATE EXTENSION IF NOT EXISTS btree_gist"))
        op.execute(
            sa.text(
                "ALTER TABLE reservations ADD CONSTRAINT ex_reservations_table_active_window "
                "EXCLUDE USING gist (table_id WITH =, tstzrange(start_time, end_time, '[)') WITH &&) "
                "WHERE (status IN ('pending', 'confirmed'))"
            )
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute(sa.text("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS ex_reservations_table_active_window"))
    op.drop_index("ix_waitlist_entries_restaurant_date", table_name="waitlist_entries")
    op.drop_index("ix_waitlist_entries_restaurant_id", table_name="waitlist_entries")
    op.drop_table("waitlist_entries")
    op.drop_index("ix_reservations_restaurant_start", table_name="reservations")
    op.drop_index("ix_reservations_table_window", table_name="reservations")
    op.drop_index("ix_reservations_table_id", table_name="reservations")
    op.drop_index("ix_reservations_restaurant_id", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("ix_restaurant_tables_restaurant_id", table_name="restaurant_tables")
    op.drop_table("restaurant_tables")
    op.drop_table("restaurants")
