# migrations/env.py
"""Alembic environment bound to the Flask app: URL and metadata come from timesheet_api."""
from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from timesheet_api.extensions import db
from timesheet_api.wsgi import app as flask_app

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

DB_URL = flask_app.config["SQLALCHEMY_DATABASE_URI"]
config.set_main_option("sqlalchemy.url", DB_URL)

CONFIGURE_KW = dict(
    target_metadata=db.metadata,
    compare_type=True,
    # SQLite cannot ALTER columns in place
    render_as_batch=DB_URL.startswith("sqlite"),
)


def run_offline():
    context.configure(url=DB_URL, literal_binds=True, **CONFIGURE_KW)
    with context.begin_transaction():
        context.run_migrations()


def run_online():
    engine = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection, flask_app.app_context():
        context.configure(connection=connection, **CONFIGURE_KW)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
