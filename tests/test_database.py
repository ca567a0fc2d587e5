"""
Tests for database.py - SQLite group store.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from geomatch.database import Group, init_database, get_session, list_member_groups, upsert_group


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Database file should be created."""
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        init_database(db_path)

        assert db_path.exists()

    def test_init_creates_tables(self, tmp_path):
        """Groups table should exist and be empty."""
        db_path = tmp_path / "test.db"
        init_database(db_path)

        session = get_session(db_path)
        assert session.query(Group).count() == 0
        session.close()

    def test_init_creates_parent_directories(self, tmp_path):
        """Missing parent directories should be created."""
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        init_database(db_path)

        assert db_path.exists()


class TestGroupStore:
    """Upserts and member listing."""

    @pytest.fixture
    def db_session(self, tmp_path):
        db_path = tmp_path / "test.db"
        init_database(db_path)
        session = get_session(db_path)
        yield session
        session.close()

    def test_group_without_name_fails(self, db_session):
        """Group without a name should violate the NOT NULL constraint."""
        db_session.add(Group(group_id="broken"))

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_upsert_new_then_no_change(self, db_session, valid_group):
        """Second upsert of the same record should be a no-op."""
        assert upsert_group(db_session, valid_group) == "new"
        db_session.commit()
        assert upsert_group(db_session, valid_group) == "no-change"

    def test_upsert_updates_changed_fields(self, db_session, valid_group):
        """Changed fields should be written back."""
        upsert_group(db_session, valid_group)
        db_session.commit()

        changed = dict(valid_group, name="דרושים בפ\"ת")
        assert upsert_group(db_session, changed) == "updated"
        db_session.commit()

        row = db_session.query(Group).filter_by(group_id=valid_group["id"]).first()
        assert row.name == "דרושים בפ\"ת"

    def test_untagged_group_is_auto_tagged(self, db_session):
        """Groups synced without tags should be tagged from their name."""
        upsert_group(db_session, {"id": "rg", "name": "דרושים ברמת גן וגבעתיים"})
        db_session.commit()

        row = db_session.query(Group).filter_by(group_id="rg").first()
        assert row.location_tags == ["רמת גן", "גבעתיים"]
        assert row.region == "center"

    def test_explicit_tags_are_kept(self, db_session):
        """Explicit tags and region should not be overwritten."""
        upsert_group(db_session, {"id": "h", "name": "משרות", "location_tags": ["חיפה"], "region": "north"})
        db_session.commit()

        row = db_session.query(Group).filter_by(group_id="h").first()
        assert row.location_tags == ["חיפה"]
        assert row.region == "north"

    def test_list_member_groups(self, db_session, valid_group):
        """Only member groups should be listed, in insertion order."""
        upsert_group(db_session, dict(valid_group, id="g1"))
        db_session.commit()
        upsert_group(db_session, {"id": "g2", "name": "דרושים בחיפה"})
        db_session.commit()
        upsert_group(db_session, {"id": "g3", "name": "קבוצה ישנה", "is_member": False})
        db_session.commit()

        groups = list_member_groups(db_session)

        assert [g.group_id for g in groups] == ["g1", "g2"]
        assert groups[0].location_tags == ("פתח תקווה",)
        assert groups[1].region == "north"
