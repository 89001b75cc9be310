import logging
import pathlib
import typing as t

from .catalog import Catalog
from .config import AuditConfig
from .errors import CdcAuditError, FilesystemError
from .naming import ARTIFACT_SUFFIX, artifact_filename, is_audit_table, table_from_artifact
from .schema import SourceTable
from .table_ddl import render_audit_table
from .trigger_ddl import render_triggers

logger = logging.getLogger(__name__)


def _ensure_dir(path: pathlib.Path) -> None:
    logger.debug("Checking if path exists: %s", path)
    if path.is_dir():
        return
    logger.debug("Path does not exist. creating: %s", path)
    try:
        path.mkdir(parents=True)
    except OSError as exc:
        raise FilesystemError(f"Cannot mkdir {path}: {exc}") from exc
    logger.info("Path created: %s", path)


def _delete_stale_artifacts(path: pathlib.Path, config: AuditConfig) -> None:
    """
    Removes artifacts of earlier runs so a table dropped from the selection
    does not leave an outdated file behind. Files of tables outside the
    include/exclude selection are kept.
    """
    logger.debug("Deleting audit table definition files in %s", path)
    for file in sorted(path.glob(f"*{ARTIFACT_SUFFIX}")):
        table = table_from_artifact(file.name)
        if table is None or not config.is_selected(table):
            continue
        try:
            file.unlink()
        except OSError as exc:
            raise FilesystemError(f"Cannot unlink old file {file}: {exc}") from exc
        logger.debug("Deleted %s", file)
    logger.info("Deleted audit table definition files in %s", path)


def render_artifact(table: SourceTable, config: AuditConfig) -> str:
    """The full text of one table's artifact: audit table, then triggers."""
    return render_audit_table(table, config) + render_triggers(table, config)


def _write_artifact(path: pathlib.Path, content: str) -> None:
    logger.info("Writing table and triggers to %s", path)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Error writing file {path}: {exc}") from exc


def _artifact_path(output_dir: pathlib.Path, table: str) -> pathlib.Path:
    path = output_dir / artifact_filename(table)
    if path.resolve().parent != output_dir.resolve():
        raise FilesystemError(
            f"Artifact of table {table!r} would be written outside {output_dir}: {path}"
        )
    return path


def generate(catalog: Catalog, config: AuditConfig) -> t.List[pathlib.Path]:
    """
    Writes one <table>.audit.sql per selected source table and returns the
    paths in catalog order.

    The first error aborts the run. Artifacts written before it stay on disk.
    """
    config.validate()
    output_dir = pathlib.Path(config.output_dir)
    _ensure_dir(output_dir)
    _delete_stale_artifacts(output_dir, config)

    written: t.List[pathlib.Path] = []
    for name in catalog.list_tables():
        if not config.is_selected(name):
            logger.info("Found table %s. Not in output list. skipping", name)
            continue
        if is_audit_table(name, config):
            logger.info("Found table %s. Appears to be an audit table. skipping", name)
            continue

        logger.debug("Processing table %s", name)
        table = catalog.get_table(name)
        path = _artifact_path(output_dir, name)
        _write_artifact(path, render_artifact(table, config))
        written.append(path)

    logger.info("Successfully generated audit tables and triggers in %s", output_dir)
    return written


def run(catalog: Catalog, config: AuditConfig) -> bool:
    """
    Runs generate() and reports the outcome instead of raising, logging the
    reason when the run was aborted.
    """
    try:
        generate(catalog, config)
    except CdcAuditError as exc:
        logger.error("%s", exc)
        return False
    return True
