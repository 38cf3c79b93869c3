"""
Single source of truth for database tables that exist after migrations.

Alembic env.py asserts that registered models match this list.
"""
ALL_TABLE_NAMES = (
    "users",
    "birthday_jobs",
)
