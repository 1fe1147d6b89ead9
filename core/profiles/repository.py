"""
Profile Repository
Database access layer for profiles.
"""
import copy
import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from core.bio_translation.models import TranslatableProfile, utcnow

from .models import Base, ProfileRecord

logger = logging.getLogger(__name__)


class SQLProfileRepository:
    """
    SQLAlchemy-backed profile store.

    Every call opens its own session and returns detached domain objects,
    so callers always work on a snapshot. Writes are last-write-wins.
    """

    def __init__(self, database_url: str = "sqlite:///data/profiles.db"):
        """Initialize repository with a SQLAlchemy database URL."""
        self.database_url = database_url
        self._engine = None
        self._session_factory = None

    @property
    def engine(self):
        """Get or create SQLAlchemy engine."""
        if self._engine is None:
            connect_args = {}
            if self.database_url.startswith("sqlite"):
                connect_args = {"check_same_thread": False}
                db_file = self.database_url.split("///", 1)[-1]
                if db_file and db_file != ":memory:" and "///" in self.database_url:
                    Path(db_file).parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_engine(self.database_url, echo=False, connect_args=connect_args)
            Base.metadata.create_all(self._engine)
        return self._engine

    @property
    def session_factory(self):
        """Get session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine)
        return self._session_factory

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.session_factory()

    def get_by_id(self, profile_id: str) -> Optional[TranslatableProfile]:
        """Get profile by ID."""
        with self.get_session() as session:
            record = session.get(ProfileRecord, profile_id)
            return record.to_entity() if record else None

    def list_profiles(self) -> List[TranslatableProfile]:
        """All profiles, newest first."""
        with self.get_session() as session:
            records = (
                session.query(ProfileRecord)
                .order_by(ProfileRecord.created_at.desc())
                .all()
            )
            return [r.to_entity() for r in records]

    def save(self, profile: TranslatableProfile) -> TranslatableProfile:
        """Insert or update a profile."""
        with self.get_session() as session:
            record = session.get(ProfileRecord, profile.id)
            if record is None:
                record = ProfileRecord(id=profile.id)
                session.add(record)
                logger.info("Created profile %s", profile.id)
            record.apply(profile)
            session.commit()
            session.refresh(record)
            return record.to_entity()

    def delete(self, profile_id: str) -> bool:
        """Delete a profile."""
        with self.get_session() as session:
            record = session.get(ProfileRecord, profile_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()
            return True


class InMemoryProfileRepository:
    """Dict-backed store with the same snapshot semantics (tests, local dev)."""

    def __init__(self, profiles: Optional[List[TranslatableProfile]] = None):
        self._lock = threading.Lock()
        self._profiles: Dict[str, TranslatableProfile] = {}
        self.save_count = 0
        for profile in profiles or []:
            self._profiles[profile.id] = copy.deepcopy(profile)

    def get_by_id(self, profile_id: str) -> Optional[TranslatableProfile]:
        with self._lock:
            profile = self._profiles.get(profile_id)
            return copy.deepcopy(profile) if profile else None

    def list_profiles(self) -> List[TranslatableProfile]:
        with self._lock:
            profiles = sorted(self._profiles.values(), key=lambda p: p.created_at, reverse=True)
            return [copy.deepcopy(p) for p in profiles]

    def save(self, profile: TranslatableProfile) -> TranslatableProfile:
        with self._lock:
            if profile.updated_at is None:
                profile.updated_at = utcnow()
            self._profiles[profile.id] = copy.deepcopy(profile)
            self.save_count += 1
            return copy.deepcopy(profile)

    def delete(self, profile_id: str) -> bool:
        with self._lock:
            return self._profiles.pop(profile_id, None) is not None
