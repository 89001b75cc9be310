import argparse
import logging
import sys
import typing as t

from .catalog import MysqlCatalog, connect, create_mysql_engine
from .config import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SUFFIX,
    DEFAULT_VERBOSITY,
    AuditConfig,
    parse_table_list,
)
from .errors import CdcAuditError, ConfigurationError
from .generator import run
from .logs import LOGGER_NAME, setup_logging

logger = logging.getLogger(LOGGER_NAME)


def build_parser() -> argparse.ArgumentParser:
    # -h is the MySQL host, as in the mysql client; help lives on -? instead.
    parser = argparse.ArgumentParser(
        prog="cdc-audit-gen",
        description="Generate MySQL audit tables and triggers for a database.",
        add_help=False,
    )
    parser.add_argument("-d", dest="db", required=True, help="source database")
    parser.add_argument("-h", dest="host", default="localhost", help="mysql host")
    parser.add_argument("-P", dest="port", type=int, default=3306, help="mysql port")
    parser.add_argument("-u", dest="user", default="root", help="mysql username")
    parser.add_argument("-p", dest="password", default="", help="mysql password")
    parser.add_argument(
        "-m", dest="output_dir", default=DEFAULT_OUTPUT_DIR, help="path to write audit files"
    )
    parser.add_argument(
        "-D", dest="audit_db", help="destination database for audit tables"
    )
    parser.add_argument(
        "-y",
        dest="dynamic_columns",
        action="store_true",
        help="store source values in MariaDB dynamic columns",
    )
    parser.add_argument(
        "-t",
        dest="tables",
        action="append",
        help="comma separated list of tables to audit, may be repeated",
    )
    parser.add_argument("-e", dest="exclude", action="store_true", help="invert -t")
    parser.add_argument(
        "-s",
        dest="separate",
        action="store_true",
        help="separate triggers named <table>_audit_<event>, "
        "leaving other triggers untouched",
    )
    parser.add_argument("-A", dest="suffix", default=DEFAULT_SUFFIX, help="audit table suffix")
    parser.add_argument("-a", dest="prefix", help="audit table prefix, replaces suffix")
    parser.add_argument("-o", dest="output", help="send all log output to FILE")
    parser.add_argument(
        "-v",
        dest="verbosity",
        type=int,
        default=DEFAULT_VERBOSITY,
        help="3 = fatal errors, 4 = warnings, 6 = informational, 7 = debug",
    )
    parser.add_argument("-?", "--help", action="help", help="print this help message")
    return parser


def config_from_args(args: argparse.Namespace) -> AuditConfig:
    config = AuditConfig(
        db=args.db,
        audit_db=args.audit_db or args.db,
        dynamic_columns=args.dynamic_columns,
        tables=parse_table_list(args.tables),
        exclude=args.exclude,
        separate=args.separate,
        prefix=args.prefix or None,
        suffix=args.suffix,
        output_dir=args.output_dir,
    )
    config.validate()
    return config


def _generate(args: argparse.Namespace, config: AuditConfig) -> bool:
    logger.debug("Connecting to mysql. host=%s, user=%s", args.host, args.user)
    engine = create_mysql_engine(args.host, args.user, args.password, args.db, args.port)
    try:
        with connect(engine) as conn:
            logger.info("Connected to mysql. Getting tables.")
            return run(MysqlCatalog(conn, args.db), config)
    finally:
        engine.dispose()


def main(argv: t.List[str]) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        parser.error(str(exc))

    try:
        setup_logging(args.verbosity, args.output)
    except OSError as exc:
        print(f"Could not open {args.output} for writing: {exc}", file=sys.stderr)
        return 1

    try:
        success = _generate(args, config)
    except CdcAuditError as exc:
        logger.error("%s", exc)
        success = False

    return 0 if success else 1


def run_cli() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    run_cli()
