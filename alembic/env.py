"""
Alembic 환경 설정
위시리스트 테이블만 관리 (DB URL은 애플리케이션 설정에서 가져옴)
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from needfully.config import get_settings
from needfully.database import Base
import needfully.models.wishlist  # noqa: F401  (Base.metadata에 테이블 등록)

config = context.config
# configparser 보간 문자(%) 이스케이프
config.set_main_option("sqlalchemy.url", get_settings().database_url_sync.replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def run_migrations_offline() -> None:
    """DB 연결 없이 SQL 스크립트 생성"""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=Base.metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """DB에 연결하여 마이그레이션 적용"""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=Base.metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
