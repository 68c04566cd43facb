"""
Database engine and session management
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from talya_pos.infrastructure.configuration.config import get_config
from talya_pos.infrastructure.database.models import Base
from talya_pos.infrastructure.utilities.constants import DatabaseSettings
from talya_pos.infrastructure.utilities.exceptions import DatabaseError


class DatabaseManager:
    """Owns the engine and session factory for one database URL"""

    def __init__(self, config: Optional[Any] = None, database_url: Optional[str] = None):
        self.config = config or get_config()
        self.database_url = database_url or self.config.database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_engine(self) -> Engine:
        """Get database engine with proper configuration"""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create database engine with environment-specific settings"""
        database_url = self.database_url
        engine_kwargs: Dict[str, Any] = {"echo": False}

        if database_url.startswith("sqlite"):
            self._ensure_sqlite_directory(database_url)
            engine_kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": DatabaseSettings.CONNECTION_TIMEOUT_SECONDS,
                },
            })
        else:
            if self.config.environment == "production":
                pool_size = DatabaseSettings.PRODUCTION_POOL_SIZE
                max_overflow = DatabaseSettings.PRODUCTION_MAX_OVERFLOW
            else:
                pool_size = DatabaseSettings.DEVELOPMENT_POOL_SIZE
                max_overflow = DatabaseSettings.DEVELOPMENT_MAX_OVERFLOW
            engine_kwargs.update({
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_recycle": DatabaseSettings.POOL_RECYCLE_SECONDS,
                "pool_pre_ping": True,
            })

        self.logger.info("🗄️ CREATING ENGINE: %s", database_url.split("@")[-1])
        return create_engine(database_url, **engine_kwargs)

    @staticmethod
    def _ensure_sqlite_directory(database_url: str) -> None:
        if "///" not in database_url:
            return
        path = database_url.split("///", 1)[1]
        if path and path != ":memory:" and not path.startswith("file:"):
            Path(path).parent.mkdir(parents=True, exist_ok=True)

    def get_session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.get_engine(), expire_on_commit=False
            )
        return self._session_factory

    def get_session(self) -> Session:
        return self.get_session_factory()()

    def create_tables(self) -> None:
        try:
            Base.metadata.create_all(self.get_engine())
            self.logger.info("✅ TABLES CREATED")
        except SQLAlchemyError as e:
            self.logger.error("💥 TABLE CREATION FAILED: %s", e)
            raise DatabaseError(f"Failed to create tables: {e}", "create_tables") from e

    def drop_tables(self) -> None:
        Base.metadata.drop_all(self.get_engine())

    def health_check(self) -> Dict[str, Any]:
        """Run a trivial query against the database"""
        try:
            with self.get_engine().connect() as connection:
                connection.execute(text("SELECT 1"))
            return {"status": "healthy"}
        except SQLAlchemyError as e:
            self.logger.error("💥 DATABASE HEALTH CHECK FAILED: %s", e)
            return {"status": "unhealthy", "error": str(e)}

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
