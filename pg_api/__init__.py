"""HTTP service with a PostgreSQL liveness check and a sample arithmetic query."""

__version__ = "1.0.0"
