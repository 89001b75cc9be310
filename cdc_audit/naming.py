"""
Derives every generated identifier from a source table name.
"""

import re
import typing as t

from .config import AuditConfig

ARTIFACT_SUFFIX = ".audit.sql"

# Characters a quoted MySQL table name may hold but a file name may not,
# plus "." (so ".." cannot appear) and "@" (so decoding is unambiguous).
_UNSAFE_FILENAME_CHARS = frozenset('@/\\.:*?"<>|')
_ENCODED_CHAR = re.compile(r"@([0-9a-f]{4})")


def audit_table_name(table: str, config: AuditConfig) -> str:
    """A configured prefix replaces the suffix entirely."""
    if config.prefix:
        return f"{config.prefix}{table}"
    return f"{table}{config.suffix}"


def trigger_name(table: str, event: str, config: AuditConfig) -> str:
    infix = "audit" if config.separate else "after"
    return f"{table}_{infix}_{event}"


def is_audit_table(table: str, config: AuditConfig) -> bool:
    """
    Treats any table whose name contains the prefix or the suffix as a
    previously generated audit table, so re-runs never audit the audit tables.
    """
    lowered = table.lower()
    return any(
        affix and affix.lower() in lowered for affix in (config.prefix, config.suffix)
    )


def _encode_char(char: str) -> str:
    if char in _UNSAFE_FILENAME_CHARS or ord(char) < 0x20:
        return f"@{ord(char):04x}"
    return char


def artifact_filename(table: str) -> str:
    """
    Names a table's artifact. Path separators, dots and other characters
    that are unsafe in a file name are written as @xxxx hex codes, the way
    MySQL names table files, so the artifact always lands in the output
    directory itself.
    """
    encoded = "".join(_encode_char(char) for char in table)
    return f"{encoded}{ARTIFACT_SUFFIX}"


def table_from_artifact(filename: str) -> t.Optional[str]:
    """Inverse of artifact_filename(); None for unrelated files."""
    if not filename.endswith(ARTIFACT_SUFFIX) or filename == ARTIFACT_SUFFIX:
        return None
    encoded = filename[: -len(ARTIFACT_SUFFIX)]
    return _ENCODED_CHAR.sub(lambda match: chr(int(match.group(1), 16)), encoded)


def quote_identifier(name: str) -> str:
    """Backtick-quotes a MySQL identifier, doubling embedded backticks."""
    escaped = name.replace("`", "``")
    return f"`{escaped}`"


def quote_string(value: str) -> str:
    """
    Single-quotes a MySQL string literal. Backslashes are doubled as well as
    quotes, so the value survives the default sql_mode unchanged.
    """
    escaped = value.replace("\\", "\\\\").replace("'", "''")
    return f"'{escaped}'"


def qualified(db: str, name: str) -> str:
    return f"{quote_identifier(db)}.{quote_identifier(name)}"
