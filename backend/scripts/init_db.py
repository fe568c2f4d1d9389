"""Create the tables straight from the models, for local setups without Alembic."""

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import Database


def main():
    setup_logging(settings.LOG_LEVEL)
    db = Database.from_settings(settings)
    try:
        db.create_all()
        print("ok: tables created")
    finally:
        db.dispose()


if __name__ == "__main__":
    main()
