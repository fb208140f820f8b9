"""
Command-line entry point: ``employees <mode> [args...]``.

Modes:
    1  create the Employees table
    2  add one employee: <full name> <birth date> <gender>
    3  list all employees ordered by name
    4  fill the table with generated employees
    5  timed select of male employees whose name starts with "F"
    6  create the (FullName, Gender) index
"""

import argparse
import logging
from typing import List, Optional

import psycopg2

from .config import Config
from .database import DatabaseConfig, DatabaseManager
from .models import Employee, Gender, parse_birth_date
from .operations import (
    Output,
    SPECIFIC_NAME_PREFIX,
    add_employee,
    create_employee_table,
    fill_employees,
    optimize_database,
    select_employees_by_criteria,
    show_all_employees,
)

logger = logging.getLogger(__name__)

MODES = (1, 2, 3, 4, 5, 6)


class CliArgumentParser(argparse.ArgumentParser):
    """Raises instead of exiting so usage errors reach the output sink."""

    def error(self, message):
        raise ValueError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = CliArgumentParser(
        prog="employees",
        description="Employee directory over PostgreSQL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("mode", nargs="?", help="Operation mode (1-6)")
    # REMAINDER keeps dash-prefixed values such as "-Ivanov" as mode arguments
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Mode arguments")
    return parser


def parse_employee(mode_args: List[str], out: Output = print) -> Optional[Employee]:
    """Validate mode 2 arguments; print a diagnostic and return None when invalid."""
    if len(mode_args) != 3:
        out("Full name, birth date and gender are required.")
        return None

    full_name, birth_date, gender = mode_args
    try:
        return Employee(full_name, parse_birth_date(birth_date), gender)
    except ValueError as e:
        out(f"Invalid employee data: {e}")
        return None


def check_database(db: DatabaseManager, out: Output = print) -> bool:
    """Probe the database once before running an operation."""
    try:
        db.ping()
    except psycopg2.Error as e:
        out(f"Failed to connect to database: {e}")
        return False

    out("DATABASE IS CONNECTED!")
    return True


def dispatch(mode: int, db: DatabaseManager, employee: Optional[Employee] = None,
             out: Output = print) -> bool:
    """Run the operation selected by `mode`."""
    if mode == 1:
        return create_employee_table(db, out=out)
    if mode == 2:
        return add_employee(db, employee, out=out)
    if mode == 3:
        return show_all_employees(db, out=out)
    if mode == 4:
        return fill_employees(db, out=out)
    if mode == 5:
        return select_employees_by_criteria(db, SPECIFIC_NAME_PREFIX, Gender.MALE, out=out)
    if mode == 6:
        return optimize_database(db, out=out)
    raise ValueError(f"Unknown mode: {mode}")


def main(argv: Optional[List[str]] = None, out: Output = print) -> int:
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        args = build_parser().parse_args(argv)
    except ValueError as e:
        out(f"Invalid arguments: {e}")
        return 0

    if args.mode is None:
        out("A mode must be specified.")
        return 0

    try:
        mode = int(args.mode)
    except ValueError:
        out("Invalid mode.")
        return 0

    if mode not in MODES:
        out("Unknown mode.")
        return 0

    employee = None
    if mode == 2:
        employee = parse_employee(args.args, out)
        if employee is None:
            return 0

    try:
        db_config = DatabaseConfig.from_options(Config.get_db_config())
    except ValueError as e:
        out(f"Invalid database configuration: {e}")
        return 0

    settings = dict(Config.get_all_config(), db_password="***")
    logger.debug(f"Configuration: {settings}")
    logger.info(f"Database: {db_config.describe()}")
    db = DatabaseManager(db_config)
    try:
        if check_database(db, out):
            dispatch(mode, db, employee, out)
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
