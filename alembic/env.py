import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from configs import Config, db
from db.models import *  # noqa: F401,F403  registers every table on db.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
log = logging.getLogger("alembic.env")

# same database the app uses (DATABASE_URL, .env already loaded by configs)
config.set_main_option("sqlalchemy.url", Config.SQLALCHEMY_DATABASE_URI)
target_metadata = db.metadata


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _skip_empty(context_, revision, directives):
    # autogenerate with no model changes should not leave an empty revision
    if getattr(config.cmd_opts, "autogenerate", False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            directives[:] = []
            log.info("No changes in schema detected.")


def _configure(**kw):
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        # ALTER on sqlite needs table copies
        render_as_batch=_is_sqlite(url),
        process_revision_directives=_skip_empty,
        **kw,
    )


def run_migrations_offline() -> None:
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
