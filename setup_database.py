# setup_database.py
# Creates the schema on the configured backend and reports what is there

from database.connection import StorageError, open_storage
from services.settings_service import SettingsService


def setup_database(storage):
    print("Setting up database...")
    count = storage.query("SELECT COUNT(*) AS count FROM appliances")
    print("✓ Database setup complete!")
    print(f"✓ {count[0]['count']} appliances stored")
    for key, value in SettingsService(storage).all().items():
        print(f"  {key} = {value}")


if __name__ == "__main__":
    storage = None
    try:
        storage = open_storage()
        setup_database(storage)
    except StorageError as e:
        print(f"✗ Setup failed: {e}")
    finally:
        if storage:
            storage.close()
