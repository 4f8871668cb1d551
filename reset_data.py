"""
reset_data.py
-------------
Clear all stored data (users, clients, vehicles, bookings) from the local data file.

For development and testing only.

Usage:
    $ python reset_data.py

Repopulate demo data afterwards with:
    $ python seeds.py
"""

from app.config import Config
from app.models.store import Store


def main():
    """Empty every collection of the persistent store and save it back to disk."""
    store = Store.instance(Config.DATA_PATH)
    store.clear()

    print(f"{store.path} has been cleared.")
    print("Tip: run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
