"""
Tests for JSON record files.
"""

import json

from geomatch.storage import load_records, save_records


class TestLoadRecords:

    def test_missing_file(self, tmp_path):
        """Missing file should give no records."""
        assert load_records(tmp_path / "nope.json") == []

    def test_empty_file(self, tmp_path):
        """Empty file should give no records."""
        path = tmp_path / "empty.json"
        path.write_text("   ")
        assert load_records(path) == []

    def test_invalid_json(self, tmp_path):
        """Invalid JSON should give no records."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert load_records(path) == []

    def test_wrapped_list(self, groups_file):
        """Records under the wrapper key should be returned."""
        records = load_records(groups_file, key="groups")
        assert [r["id"] for r in records] == ["ptjobs", "b7jobs", "southtech"]

    def test_bare_list_drops_non_objects(self, tmp_path):
        """Non-object items in a bare list should be dropped."""
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{"id": "a"}, 3, "x", {"id": "b"}]))
        assert load_records(path) == [{"id": "a"}, {"id": "b"}]

    def test_single_object(self, tmp_path, valid_job):
        """A single object should become a one-record list."""
        path = tmp_path / "job.json"
        path.write_text(json.dumps(valid_job, ensure_ascii=False), encoding="utf-8")
        assert load_records(path, key="jobs") == [valid_job]


class TestSaveRecords:

    def test_writes_readable_hebrew(self, tmp_path, scenario_groups):
        """Saved file should keep Hebrew unescaped and load back."""
        path = tmp_path / "out" / "groups.json"
        save_records(path, scenario_groups)

        text = path.read_text(encoding="utf-8")
        assert "פתח תקווה" in text
        assert load_records(path) == scenario_groups
