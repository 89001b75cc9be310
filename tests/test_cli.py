import contextlib
import pathlib
import subprocess
import sys
import typing as t
from unittest import mock

import pytest

from cdc_audit import __main__ as cli
from cdc_audit.errors import CatalogQueryError
from cdc_audit.schema import SourceColumn, SourceTable


class FakeCatalog:
    def __init__(self, conn: t.Any, db: str) -> None:
        self.db = db

    def list_tables(self) -> t.List[str]:
        return ["post", "comment", "author", "post_audit"]

    def get_table(self, name: str) -> SourceTable:
        return SourceTable(name, [SourceColumn("id", "varchar(36)", False, True)])


@contextlib.contextmanager
def fake_connect(engine: t.Any) -> t.Iterator[mock.MagicMock]:
    yield mock.MagicMock()


@pytest.fixture
def offline() -> t.Iterator[mock.MagicMock]:
    """Replaces the MySQL server with an in-memory catalog."""
    with mock.patch.object(cli, "create_mysql_engine") as engine, mock.patch.object(
        cli, "connect", fake_connect
    ), mock.patch.object(cli, "MysqlCatalog", FakeCatalog):
        yield engine


def test_help() -> None:
    result = subprocess.run(
        [sys.executable, "-m", "cdc_audit", "-?"], capture_output=True, text=True
    )
    assert result.returncode == 0
    assert "-d DB" in result.stdout


def test_main(tmp_path: pathlib.Path, offline: mock.MagicMock) -> None:
    out = tmp_path / "gen"
    status = cli.main(
        ["-d", "blog", "-h", "db.local", "-u", "me", "-m", str(out), "-t", "post,author"]
    )

    assert status == 0
    offline.assert_called_once_with("db.local", "me", "", "blog", 3306)
    assert sorted(p.name for p in out.iterdir()) == ["author.audit.sql", "post.audit.sql"]
    sql = (out / "post.audit.sql").read_text()
    assert "CREATE TABLE IF NOT EXISTS `blog`.`post_audit`" in sql


def test_options_reach_the_config() -> None:
    args = cli.build_parser().parse_args(
        ["-d", "blog", "-D", "history", "-y", "-s", "-e", "-t", "a", "-t", "b,c", "-a", "x_"]
    )
    config = cli.config_from_args(args)

    assert config.audit_db == "history"
    assert config.dynamic_columns and config.separate and config.exclude
    assert config.tables == frozenset({"a", "b", "c"})
    assert config.prefix == "x_"
    assert config.suffix == "_audit"
    assert cli.config_from_args(cli.build_parser().parse_args(["-d", "blog"])).audit_db == "blog"


def test_log_output_goes_to_file(tmp_path: pathlib.Path, offline: mock.MagicMock) -> None:
    log = tmp_path / "run.log"
    status = cli.main(["-d", "blog", "-m", str(tmp_path / "gen"), "-v", "7", "-o", str(log)])

    assert status == 0
    text = log.read_text()
    assert "Processing table comment" in text
    assert "Appears to be an audit table" in text


def test_failure_exits_non_zero(tmp_path: pathlib.Path, offline: mock.MagicMock) -> None:
    log = tmp_path / "run.log"
    with mock.patch.object(
        FakeCatalog, "list_tables", side_effect=CatalogQueryError("access denied")
    ):
        status = cli.main(["-d", "blog", "-m", str(tmp_path / "gen"), "-o", str(log)])

    assert status == 1
    assert "access denied" in log.read_text()


def test_empty_suffix_without_prefix_is_a_usage_error(
    tmp_path: pathlib.Path, offline: mock.MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    out = tmp_path / "gen"
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-d", "blog", "-m", str(out), "-A", ""])

    assert excinfo.value.code == 2
    assert "non-empty prefix or suffix" in capsys.readouterr().err
    offline.assert_not_called()
    assert not out.exists()

    assert cli.main(["-d", "blog", "-m", str(out), "-A", "", "-a", "hist_"]) == 0
    assert "`blog`.`hist_post`" in (out / "post.audit.sql").read_text()
