# database/queries.py
# Appliance and settings statements. usage_days is JSON text in storage and
# a list of ints everywhere above this module.

import json

APPLIANCE_COLUMNS = (
    'id, name, power_watts, daily_hours, usage_days, standby_watts, created_at, updated_at'
)

# Columns an update may touch; doubles as a whitelist for the SET clause
UPDATABLE_COLUMNS = ('name', 'power_watts', 'daily_hours', 'usage_days', 'standby_watts')


class UsageDaysFormatError(ValueError):
    """Stored usage_days value could not be decoded"""


def encode_usage_days(days):
    """List of day numbers -> JSON text"""
    return json.dumps([int(d) for d in days])


def decode_usage_days(raw):
    """JSON text (or an already decoded list) -> list of day numbers"""
    if isinstance(raw, (list, tuple)):
        days = list(raw)
    elif isinstance(raw, str):
        try:
            days = json.loads(raw)
        except json.JSONDecodeError as e:
            raise UsageDaysFormatError(f"Invalid usage_days value: {raw!r}") from e
    else:
        raise UsageDaysFormatError(f"Invalid usage_days format: {type(raw).__name__}")

    if not isinstance(days, list) or not all(
        isinstance(d, int) and not isinstance(d, bool) for d in days
    ):
        raise UsageDaysFormatError(f"Invalid usage_days value: {raw!r}")
    return days


def _decode_row(row):
    row = dict(row)
    row['usage_days'] = decode_usage_days(row['usage_days'])
    if row.get('standby_watts') is None:
        row['standby_watts'] = 0
    return row


def insert_appliance(storage, name, power_watts, daily_hours, usage_days, standby_watts, timestamp):
    """Insert an appliance and return the generated id"""
    sql = """
        INSERT INTO appliances
            (name, power_watts, daily_hours, usage_days, standby_watts, created_at, updated_at)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        RETURNING id
    """
    result = storage.run(sql, (
        name,
        power_watts,
        daily_hours,
        encode_usage_days(usage_days),
        standby_watts,
        timestamp,
        timestamp
    ))
    return result.last_insert_rowid


def get_appliance(storage, appliance_id):
    """Get one appliance row, or None"""
    sql = f"SELECT {APPLIANCE_COLUMNS} FROM appliances WHERE id = %s"
    results = storage.query(sql, (appliance_id,))
    return _decode_row(results[0]) if results else None


def get_all_appliances(storage):
    """All appliance rows, newest first"""
    sql = f"SELECT {APPLIANCE_COLUMNS} FROM appliances ORDER BY created_at DESC, id DESC"
    return [_decode_row(row) for row in storage.query(sql)]


def update_appliance(storage, appliance_id, fields, timestamp):
    """
    Write the supplied columns plus updated_at in one statement.

    Args:
        fields: dict of column -> new value (keys must be in UPDATABLE_COLUMNS)

    Returns:
        Number of rows changed
    """
    assignments = []
    values = []
    for column in UPDATABLE_COLUMNS:
        if column not in fields:
            continue
        value = fields[column]
        if column == 'usage_days':
            value = encode_usage_days(value)
        assignments.append(f"{column} = %s")
        values.append(value)

    unknown = set(fields) - set(UPDATABLE_COLUMNS)
    if unknown:
        raise ValueError(f"Columns not updatable: {', '.join(sorted(unknown))}")

    assignments.append("updated_at = %s")
    values.append(timestamp)
    values.append(appliance_id)

    sql = f"UPDATE appliances SET {', '.join(assignments)} WHERE id = %s"
    return storage.run(sql, tuple(values)).changes


def delete_appliance(storage, appliance_id):
    """Delete one appliance; returns number of rows removed"""
    sql = "DELETE FROM appliances WHERE id = %s"
    return storage.run(sql, (appliance_id,)).changes


def get_setting(storage, key):
    sql = "SELECT value FROM settings WHERE key = %s"
    results = storage.query(sql, (key,))
    return results[0]['value'] if results else None


def get_all_settings(storage):
    sql = "SELECT key, value FROM settings ORDER BY key"
    return {row['key']: row['value'] for row in storage.query(sql)}


def save_setting(storage, key, value, timestamp):
    """Insert or replace a setting"""
    sql = """
        INSERT INTO settings (key, value, updated_at)
        VALUES (%s, %s, %s)
        ON CONFLICT (key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
    """
    storage.run(sql, (key, str(value), timestamp))
