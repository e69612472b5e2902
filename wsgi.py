"""
WSGI entry point for the Student Roster API.

For gunicorn: wsgi:app
For local development: python wsgi.py
"""

import os

from sqlalchemy.exc import SQLAlchemyError

from roster import app
from roster.extensions import db
from roster.records import get_settings


def ensure_settings_singleton():
    """
    Create the feature settings row at startup.

    Runs once per process before serving so concurrent first requests do
    not race to create it. Skipped (with a warning) when the schema has not
    been migrated yet; `flask init-settings` can be run afterwards.
    """
    with app.app_context():
        try:
            settings = get_settings()
            app.logger.info(f"🛡️ Settings ready: {settings.to_dict()}")
        except SQLAlchemyError as e:
            db.session.rollback()
            app.logger.warning(f"Could not initialize settings at startup: {e}")


ensure_settings_singleton()


if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "5000"))
    app.run(host=host, port=port)
