import typing as t

from .errors import ConfigurationError

DEFAULT_SUFFIX = "_audit"
DEFAULT_OUTPUT_DIR = "./cdc_audit_gen"
DEFAULT_VERBOSITY = 4


class AuditConfig(t.NamedTuple):
    """
    Everything that shapes the generated SQL, fixed for the whole run.

    `tables` is None when every table should be processed; otherwise it is
    the include list, or the exclude list when `exclude` is set.
    """

    db: str
    audit_db: str
    dynamic_columns: bool = False
    tables: t.Optional[t.FrozenSet[str]] = None
    exclude: bool = False
    separate: bool = False
    prefix: t.Optional[str] = None
    suffix: str = DEFAULT_SUFFIX
    output_dir: str = DEFAULT_OUTPUT_DIR

    def validate(self) -> None:
        """
        Rejects naming options under which an audit table would share its
        source table's name and its triggers would write into their own table.
        """
        if not self.prefix and not self.suffix:
            raise ConfigurationError(
                "audit tables need a non-empty prefix or suffix, "
                "otherwise they are named like the audited tables"
            )

    def is_selected(self, table: str) -> bool:
        """Applies the include/exclude table list."""
        if self.tables is None:
            return True
        listed = table in self.tables
        return not listed if self.exclude else listed


def parse_table_list(values: t.Optional[t.Iterable[str]]) -> t.Optional[t.FrozenSet[str]]:
    """
    Flattens repeated and comma separated table arguments, so that
    ["a,b", " c "] becomes {"a", "b", "c"}. Returns None for no tables.
    """
    if not values:
        return None
    names = {name.strip() for value in values for name in value.split(",")}
    names.discard("")
    return frozenset(names) or None
