"""Engine factory for the in-memory tabular database."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool


def create_memory_engine(echo: bool = False) -> Engine:
    """Return an engine bound to one private in-memory SQLite database.

    ``StaticPool`` hands every checkout the same DBAPI connection, so all
    tables live in a single database for the lifetime of the engine.
    """
    return create_engine(
        "sqlite://",
        echo=echo,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


__all__ = ["create_memory_engine"]
