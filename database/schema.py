# database/schema.py
# Table definitions for both backends. CHECK constraints mirror the
# validation domains in services/validation_service.py. Name length is
# checked before escaping, so only non-emptiness is enforced here

SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS appliances (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL CHECK (length(name) >= 1),
    power_watts REAL NOT NULL CHECK (power_watts >= 0.1 AND power_watts <= 10000),
    daily_hours REAL NOT NULL CHECK (daily_hours >= 0 AND daily_hours <= 24),
    usage_days TEXT NOT NULL,
    standby_watts REAL NOT NULL DEFAULT 0 CHECK (standby_watts >= 0 AND standby_watts <= 1000),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL CHECK (updated_at >= created_at)
);

CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_appliances_created ON appliances(created_at);

INSERT OR IGNORE INTO settings (key, value) VALUES
    ('rate_per_kwh', '0.12'),
    ('currency', 'USD'),
    ('time_of_use_enabled', 'false');
"""

POSTGRES_SCHEMA = """
CREATE TABLE IF NOT EXISTS appliances (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL CHECK (char_length(name) >= 1),
    power_watts DOUBLE PRECISION NOT NULL CHECK (power_watts >= 0.1 AND power_watts <= 10000),
    daily_hours DOUBLE PRECISION NOT NULL CHECK (daily_hours >= 0 AND daily_hours <= 24),
    usage_days TEXT NOT NULL,
    standby_watts DOUBLE PRECISION NOT NULL DEFAULT 0 CHECK (standby_watts >= 0 AND standby_watts <= 1000),
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL CHECK (updated_at >= created_at)
);

CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_appliances_created ON appliances(created_at);

INSERT INTO settings (key, value) VALUES
    ('rate_per_kwh', '0.12'),
    ('currency', 'USD'),
    ('time_of_use_enabled', 'false')
ON CONFLICT (key) DO NOTHING;
"""
