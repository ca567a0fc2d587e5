"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for the distribution group store.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from sqlalchemy import create_engine, Column, String, DateTime, Boolean, JSON
from sqlalchemy.orm import declarative_base, sessionmaker

from .geo_data import GENERAL
from .normalize import auto_tag_group
from .schema import DistributionGroup

Base = declarative_base()


class Group(Base):
    """Distribution group (Facebook group or page)."""

    __tablename__ = "groups"

    group_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False, default="")
    is_member = Column(Boolean, nullable=False, default=True)
    location_tags = Column(JSON, nullable=False, default=list)
    region = Column(String, nullable=False, default=GENERAL)
    keywords = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def to_group(self) -> DistributionGroup:
        return DistributionGroup(
            group_id=self.group_id,
            name=self.name,
            url=self.url or "",
            is_member=bool(self.is_member),
            location_tags=tuple(self.location_tags or ()),
            region=self.region or GENERAL,
            keywords=tuple(self.keywords or ()),
        )


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()


def upsert_group(session, record: Dict[str, Any]) -> str:
    """
    Insert or update a group from a validated record.

    Groups synced without location tags get them derived from the name.
    Does not commit.

    Returns:
        "new", "updated" or "no-change"
    """
    group = DistributionGroup.from_record(record)
    tags = list(group.location_tags)
    region = group.region
    if not tags and region == GENERAL:
        tags, region = auto_tag_group(group.name)

    values = {
        "name": group.name,
        "url": group.url,
        "is_member": group.is_member,
        "location_tags": tags,
        "region": region,
        "keywords": list(group.keywords),
    }

    existing = session.query(Group).filter_by(group_id=group.group_id).first()
    if existing is None:
        session.add(Group(group_id=group.group_id, **values))
        return "new"

    changed = False
    for key, value in values.items():
        if getattr(existing, key) != value:
            setattr(existing, key, value)
            changed = True
    return "updated" if changed else "no-change"


def list_member_groups(session) -> List[DistributionGroup]:
    """Groups the account belongs to, in insertion order."""
    rows = (
        session.query(Group)
        .filter(Group.is_member.is_(True))
        .order_by(Group.created_at, Group.group_id)
        .all()
    )
    return [row.to_group() for row in rows]
