"""
Tests for the location knowledge base.
"""

import pytest

from geomatch.geo_data import (
    CITY_TABLE,
    GENERAL,
    REGIONS,
    KnowledgeBaseError,
    LocationEntry,
    cities_in_region,
    resolve_region_name,
    shadowed_entries,
    validate_table,
)


class TestLocationEntry:
    """Construction-time validation of table rows."""

    def test_valid_entry(self):
        """Valid row should match its keywords only."""
        entry = LocationEntry(name="חיפה", region="north", keywords=("חיפה", "haifa"))
        assert entry.matches("דרושים בחיפה")
        assert entry.matches("jobs in haifa")
        assert not entry.matches("תל אביב")

    def test_empty_name_fails(self):
        """Blank name should be rejected."""
        with pytest.raises(KnowledgeBaseError):
            LocationEntry(name="  ", region="north", keywords=("x",))

    def test_empty_keywords_fail(self):
        """Row without keywords should be rejected."""
        with pytest.raises(KnowledgeBaseError):
            LocationEntry(name="חיפה", region="north", keywords=())

    def test_blank_keyword_fails(self):
        """Blank keyword should be rejected."""
        with pytest.raises(KnowledgeBaseError):
            LocationEntry(name="חיפה", region="north", keywords=("חיפה", ""))

    def test_unknown_region_fails(self):
        """Region outside the closed set should be rejected."""
        with pytest.raises(KnowledgeBaseError):
            LocationEntry(name="חיפה", region="galilee", keywords=("חיפה",))

    def test_general_is_not_a_city_region(self):
        """Cities cannot be general."""
        with pytest.raises(KnowledgeBaseError):
            LocationEntry(name="חיפה", region=GENERAL, keywords=("חיפה",))

    def test_name_must_be_a_keyword(self):
        """Canonical name must be one of the keywords."""
        with pytest.raises(KnowledgeBaseError):
            LocationEntry(name="חיפה", region="north", keywords=("haifa",))

    def test_error_is_value_error(self):
        """Knowledge base errors should be ValueErrors."""
        assert issubclass(KnowledgeBaseError, ValueError)


class TestValidateTable:
    """Table-level invariants."""

    def test_empty_table_fails(self):
        """Empty table should be rejected."""
        with pytest.raises(KnowledgeBaseError):
            validate_table([])

    def test_duplicate_name_fails(self):
        """Duplicate canonical names should be rejected."""
        rows = list(CITY_TABLE) + [CITY_TABLE[0]]
        with pytest.raises(KnowledgeBaseError):
            validate_table(rows)

    def test_missing_region_fails(self):
        """Every named region needs at least one city."""
        rows = [e for e in CITY_TABLE if e.region != "shfela"]
        with pytest.raises(KnowledgeBaseError):
            validate_table(rows)

    def test_shipped_table_is_valid(self):
        """Shipped table should pass validation."""
        assert validate_table(CITY_TABLE) == CITY_TABLE


class TestShippedTable:
    """Coverage and ordering of the shipped table."""

    def test_every_named_region_has_cities(self):
        """Each named region should have several cities."""
        for region in REGIONS:
            if region == GENERAL:
                continue
            assert len(cities_in_region(region)) >= 2, region

    def test_no_general_cities(self):
        """No city should belong to general."""
        assert cities_in_region(GENERAL) == []

    def test_names_are_unique(self):
        """Canonical names should be unique."""
        names = [e.name for e in CITY_TABLE]
        assert len(names) == len(set(names))

    def test_no_entry_is_shadowed(self):
        """Every canonical name must resolve to its own row under first-match lookup."""
        assert shadowed_entries() == []

    def test_compound_names_precede_substrings(self):
        """Compound names should be listed before their substrings."""
        names = [e.name for e in CITY_TABLE]
        assert names.index("אור יהודה") < names.index("יהוד")
        assert names.index("אבן יהודה") < names.index("יהוד")

    def test_common_abbreviations_present(self):
        """Common abbreviations should be in the table."""
        keywords = {k for e in CITY_TABLE for k in e.keywords}
        for abbrev in ['ת"א', 'פ"ת', 'ראשל"צ', 'ב"ש', 'כפ"ס']:
            assert abbrev in keywords


class TestResolveRegionName:
    """Declared region values."""

    @pytest.mark.parametrize("value,expected", [
        ("center", "center"),
        ("מרכז", "center"),
        ("SOUTH", "south"),
        (" דרום ", "south"),
        ("שרון", "sharon"),
        ("shfela", "shfela"),
        ("צפון", "north"),
        ("ירושלים", "jerusalem"),
    ])
    def test_known_values(self, value, expected):
        """Region names and synonyms should resolve."""
        assert resolve_region_name(value) == expected

    @pytest.mark.parametrize("value", [None, "", "general", "mars", 7])
    def test_unknown_values(self, value):
        """Unknown values and general should resolve to None."""
        assert resolve_region_name(value) is None
