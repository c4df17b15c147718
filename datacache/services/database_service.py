"""SQLAlchemy-based database service for the data cache"""
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..errors import StorageUnavailable, TransactionFailed
from ..models.cache_orm import Base

logger = logging.getLogger(__name__)

MEMORY_DB_PATH = ":memory:"


class DatabaseService:
    """
    SQLite database service backing the data cache.

    Owns the SQLAlchemy engine and session factory. Every unit of work goes
    through ``session_scope()`` so that it runs in its own transaction.
    """

    def __init__(self, db_path: str = "./data/cache.db", echo: bool = False):
        """
        Initialize database service.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            echo: Log emitted SQL statements
        """
        # Public: Database path
        self.db_path = db_path
        self.echo = echo

        # Private: SQLAlchemy engine and session factory
        self.__engine: Optional[Engine] = None
        self.__SessionLocal: Optional[sessionmaker] = None
        self.__connect_lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self.__engine is not None

    @property
    def engine(self) -> Optional[Engine]:
        return self.__engine

    def connect(self) -> None:
        """
        Connect to the SQLite database and make sure the schema exists.

        Raises:
            StorageUnavailable: If the database cannot be opened
        """
        if self.is_connected:
            return

        with self.__connect_lock:
            if not self.is_connected:
                self.__open()

    def __open(self) -> None:
        try:
            if self.db_path == MEMORY_DB_PATH:
                # One shared connection, otherwise each session sees an empty database
                engine = create_engine(
                    "sqlite://",
                    echo=self.echo,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            else:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    echo=self.echo,
                    connect_args={"check_same_thread": False}  # Allow multi-threaded access
                )
            self.initialize_schema(engine)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailable(self.db_path, str(e)) from e

        self.__engine = engine
        self.__SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=engine
        )
        logger.info(f"Connected to cache database: {self.db_path}")

    def disconnect(self) -> None:
        """Disconnect from database"""
        if self.__engine:
            self.__engine.dispose()
            self.__engine = None
            self.__SessionLocal = None
            logger.info("Disconnected from cache database")

    @staticmethod
    def initialize_schema(engine: Engine) -> None:
        """Create the cache table if it doesn't exist"""
        Base.metadata.create_all(engine)
        logger.debug("Cache schema initialized")

    @contextmanager
    def session_scope(
        self,
        operation: Optional[str] = None,
        key: Optional[str] = None
    ) -> Iterator[Session]:
        """
        Context manager for one transaction.

        Commits on success and rolls back on error. Connects lazily.

        Args:
            operation: Name of the calling operation, used in error context
            key: Cache key involved, used in error context

        Yields:
            Session bound to the cache database

        Raises:
            StorageUnavailable: If the database cannot be opened
            TransactionFailed: If SQLAlchemy reports an error inside the scope
        """
        self.connect()

        session = self.__SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise TransactionFailed(str(e), operation=operation, key=key) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
