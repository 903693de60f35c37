"""Column types shared by the container task models.

Destinations are stored as JSON: JSONB on PostgreSQL, plain JSON on SQLite.
"""
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

JSONType = JSON().with_variant(JSONB(), "postgresql")
