import logging
from typing import List, Mapping, Optional

from sqlalchemy import func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from idea2impact.core.errors import PersistenceError
from idea2impact.db.base import Base
from idea2impact.db.session import create_db_engine, create_session_factory
from idea2impact.models.registration import OPTIONAL_FIELDS, REQUIRED_FIELDS, Registration

logger = logging.getLogger(__name__)

class RegistrationStore:
    """Durable persistence of registrations.

    Owns record identity and the createdAt/updatedAt timestamps. One instance
    (and its connection pool) lives for the whole process.
    """

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker] = None):
        self.engine = engine
        self.session_factory = session_factory or create_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "RegistrationStore":
        return cls(create_db_engine(database_url))

    def init_schema(self):
        """Create the registrations table if it does not exist yet"""
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Schema initialization failed: {e}") from e

    def create(self, fields: Mapping[str, Optional[str]]) -> Registration:
        """Insert one registration and return it with its server-assigned fields."""
        known = set(REQUIRED_FIELDS) | set(OPTIONAL_FIELDS)
        registration = Registration(**{k: v for k, v in fields.items() if k in known})

        with self.session_factory() as db:
            try:
                db.add(registration)
                db.commit()
                db.refresh(registration)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"❌ Failed to store registration for {registration.email}: {e}")
                raise PersistenceError(str(e)) from e

        logger.info(f"💾 Stored registration {registration.id}")
        return registration

    def get(self, registration_id: str) -> Optional[Registration]:
        with self.session_factory() as db:
            try:
                return db.get(Registration, registration_id)
            except SQLAlchemyError as e:
                raise PersistenceError(str(e)) from e

    def count(self) -> int:
        with self.session_factory() as db:
            try:
                return db.scalar(select(func.count()).select_from(Registration))
            except SQLAlchemyError as e:
                raise PersistenceError(str(e)) from e

    def list_recent(self, limit: int = 5) -> List[Registration]:
        """Newest registrations first"""
        with self.session_factory() as db:
            try:
                query = select(Registration).order_by(Registration.created_at.desc()).limit(limit)
                return list(db.scalars(query))
            except SQLAlchemyError as e:
                raise PersistenceError(str(e)) from e

    def ping(self):
        """Round-trip to the database, raises PersistenceError when unreachable"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

    def dispose(self):
        self.engine.dispose()
