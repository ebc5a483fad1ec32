"""Root conftest — shared test configuration."""

import os

# Importing psql_mapper.main reads settings; never point tests at a real server.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")
