"""Tests for table reference and alias resolution."""

from sqlsense.sql_completion import TableRef, resolve_table_refs
from sqlsense.domains.query.completion.tables import split_qualified_name

EMP = TableRef(table="EMP", schema="HR")
DEPT = TableRef(table="DEPT", schema="HR")
ORDERS = TableRef(table="ORDERS", schema="SALES")


class TestSplitQualifiedName:
    """Tests for schema/table splitting."""

    def test_bare(self):
        assert split_qualified_name("EMP") == TableRef(table="EMP")

    def test_schema_qualified(self):
        assert split_qualified_name("HR.EMP") == EMP

    def test_multi_part_uses_last_two(self):
        assert split_qualified_name("DB.HR.EMP") == EMP


class TestResolveTableRefs:
    """Tests for resolve_table_refs."""

    def test_from_with_alias(self):
        resolution = resolve_table_refs("SELECT * FROM HR.EMP E WHERE ")
        assert resolution.table_map == {"E": EMP, "EMP": EMP}

    def test_from_with_as_alias(self):
        resolution = resolve_table_refs("SELECT * FROM HR.EMP AS E WHERE ")
        assert resolution.table_map == {"E": EMP, "EMP": EMP}

    def test_bare_table(self):
        resolution = resolve_table_refs("SELECT * FROM EMP")
        assert resolution.table_map == {"EMP": TableRef(table="EMP")}

    def test_reserved_word_is_not_alias(self):
        resolution = resolve_table_refs("SELECT * FROM HR.EMP WHERE ")
        assert resolution.table_map == {"EMP": EMP}

    def test_comma_separated_from_list(self):
        resolution = resolve_table_refs("SELECT * FROM HR.EMP E, SALES.ORDERS O WHERE ")
        assert resolution.table_map == {"E": EMP, "EMP": EMP, "O": ORDERS, "ORDERS": ORDERS}

    def test_join(self):
        resolution = resolve_table_refs("SELECT * FROM HR.EMP E LEFT JOIN HR.DEPT D ON ")
        assert resolution.table_map == {"E": EMP, "EMP": EMP, "D": DEPT, "DEPT": DEPT}

    def test_derived_table(self):
        resolution = resolve_table_refs("SELECT * FROM (                ) D WHERE ")
        assert resolution.table_map == {"D": TableRef(table="D", derived=True)}

    def test_derived_table_without_alias_ignored(self):
        assert resolve_table_refs("SELECT * FROM (     ) WHERE ").table_map == {}

    def test_update_target(self):
        resolution = resolve_table_refs("UPDATE HR.EMP SET ")
        assert resolution.update_target == EMP
        assert resolution.table_map == {"EMP": EMP}

    def test_update_alias(self):
        resolution = resolve_table_refs("UPDATE HR.EMP E SET ")
        assert resolution.table_map == {"E": EMP, "EMP": EMP}

    def test_insert_target(self):
        resolution = resolve_table_refs("INSERT INTO HR.EMP (")
        assert resolution.insert_target == EMP
        assert resolution.table_map == {}

    def test_delete_from(self):
        resolution = resolve_table_refs("DELETE FROM HR.EMP WHERE ")
        assert resolution.table_map == {"EMP": EMP}

    def test_alias_reuse_last_match_wins(self):
        resolution = resolve_table_refs("SELECT * FROM HR.EMP X JOIN SALES.ORDERS X ON ")
        assert resolution.table_map["X"] == ORDERS

    def test_lookup_any_casing(self):
        resolution = resolve_table_refs("SELECT * FROM HR.EMP E")
        assert resolution.lookup("e") == EMP
        assert resolution.lookup("nope") is None

    def test_no_tables(self):
        resolution = resolve_table_refs("SELECT ")
        assert not resolution.has_tables
        assert resolution.update_target is None
        assert resolution.insert_target is None
