"""Default builtin function catalog and editor language ids per database type."""

from __future__ import annotations

from .core import BuiltinFunction, normalize_database_type

DEFAULT_BUILTINS: dict[str, list[BuiltinFunction]] = {
    "oracle": [
        BuiltinFunction("NVL", "Replace NULL with a default value", "NVL(commission, 0)"),
        BuiltinFunction("NVL2", "Choose a value based on NULL-ness", "NVL2(commission, 'Y', 'N')"),
        BuiltinFunction("DECODE", "Inline IF-THEN-ELSE comparison", "DECODE(status, 'A', 'Active', 'Other')"),
        BuiltinFunction("TO_CHAR", "Convert a date or number to text", "TO_CHAR(hire_date, 'YYYY-MM-DD')"),
        BuiltinFunction("TO_DATE", "Convert text to a date", "TO_DATE('2024-01-31', 'YYYY-MM-DD')"),
        BuiltinFunction("SYSDATE", "Current database date and time", "SYSDATE"),
        BuiltinFunction("SUBSTR", "Extract part of a string", "SUBSTR(name, 1, 3)"),
        BuiltinFunction("LISTAGG", "Concatenate values within a group", "LISTAGG(name, ', ') WITHIN GROUP (ORDER BY name)"),
    ],
    "postgresql": [
        BuiltinFunction("COALESCE", "First non-NULL argument", "COALESCE(nickname, name)"),
        BuiltinFunction("NOW", "Current transaction timestamp", "NOW()"),
        BuiltinFunction("DATE_TRUNC", "Truncate a timestamp to a precision", "DATE_TRUNC('month', created_at)"),
        BuiltinFunction("STRING_AGG", "Concatenate values with a separator", "STRING_AGG(name, ', ')"),
        BuiltinFunction("ARRAY_AGG", "Collect values into an array", "ARRAY_AGG(id)"),
        BuiltinFunction("TO_CHAR", "Format a value as text", "TO_CHAR(created_at, 'YYYY-MM-DD')"),
    ],
    "mysql": [
        BuiltinFunction("IFNULL", "Replace NULL with a default value", "IFNULL(discount, 0)"),
        BuiltinFunction("NOW", "Current date and time", "NOW()"),
        BuiltinFunction("DATE_FORMAT", "Format a date as text", "DATE_FORMAT(created_at, '%Y-%m-%d')"),
        BuiltinFunction("GROUP_CONCAT", "Concatenate values within a group", "GROUP_CONCAT(name SEPARATOR ', ')"),
        BuiltinFunction("CONCAT", "Concatenate strings", "CONCAT(first_name, ' ', last_name)"),
    ],
    "mssql": [
        BuiltinFunction("ISNULL", "Replace NULL with a default value", "ISNULL(discount, 0)"),
        BuiltinFunction("GETDATE", "Current date and time", "GETDATE()"),
        BuiltinFunction("DATEADD", "Add an interval to a date", "DATEADD(day, 7, order_date)"),
        BuiltinFunction("DATEDIFF", "Difference between two dates", "DATEDIFF(day, start_date, end_date)"),
        BuiltinFunction("STRING_AGG", "Concatenate values with a separator", "STRING_AGG(name, ', ')"),
    ],
    "sqlite": [
        BuiltinFunction("IFNULL", "Replace NULL with a default value", "IFNULL(discount, 0)"),
        BuiltinFunction("DATETIME", "Format a date and time", "DATETIME('now')"),
        BuiltinFunction("GROUP_CONCAT", "Concatenate values within a group", "GROUP_CONCAT(name, ', ')"),
        BuiltinFunction("SUBSTR", "Extract part of a string", "SUBSTR(name, 1, 3)"),
    ],
}

DB_LANGUAGES: dict[str, str] = {
    "oracle": "plsql",
    "mssql": "sql",
    "mysql": "mysql",
    "mariadb": "mysql",
    "postgresql": "pgsql",
    "redshift": "redshift",
}


def language_for(database_type: str) -> str:
    """Editor language id for a database type, `sql` when unknown."""
    return DB_LANGUAGES.get(normalize_database_type(database_type), "sql")
