"""DDL for the job tracker database.

All statements use IF NOT EXISTS so opening a store is idempotent.
"""

TABLE_NAME = "job_applications"

SCHEMA_SQL = """
-- One row per job application; status holds the encoded Status text
CREATE TABLE IF NOT EXISTS job_applications (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    date        TEXT,      -- ISO-8601 calendar date
    cv_path     TEXT,
    company     TEXT NOT NULL,
    position    TEXT NOT NULL,
    status      TEXT NOT NULL,  -- applied | interview:<n> | offer:<n> | rejected
    location    TEXT NOT NULL,
    salary_min  INTEGER NOT NULL DEFAULT 0,
    salary_max  INTEGER NOT NULL DEFAULT 0,
    created_at  DATETIME DEFAULT CURRENT_TIMESTAMP
);
"""
