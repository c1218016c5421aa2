import os

# Keep imports of the db package off a real Postgres server.
os.environ.setdefault("DATABASE_URL", "sqlite://")
