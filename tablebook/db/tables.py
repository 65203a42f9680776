"""
Single source of truth for ledger tables that exist after migrations (001).

Use these names when writing raw SQL.
"""
# All tables that exist in the DB. Must match models and migration 001.
ALL_TABLE_NAMES = (
    "restaurants",
    "restaurant_tables",
    "reservations",
    "waitlist_entries",
)

# Statuses that hold a table. Must match the WHERE clause of the exclusion constraint in 001.
ACTIVE_STATUSES = ("pending", "confirmed")
