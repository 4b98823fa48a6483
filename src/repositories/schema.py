"""Schema bootstrap for the league tables."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models.base import Base

# Imported for their side effect of registering tables on Base.metadata.
import models  # noqa: F401


def ensure_schema(engine: Engine) -> None:
    """Create league tables and indexes if they do not exist."""
    with engine.begin() as connection:
        Base.metadata.create_all(bind=connection, checkfirst=True)
