"""
The six operations of the employee directory, one per CLI mode.

Every operation checks out a single connection, reports its result to a
text sink (``print`` unless told otherwise) and returns True on success.
Database errors are reported to the sink and logged, never raised.
"""

import logging
import random
import time
from datetime import date
from typing import Callable, Iterable, Optional

import psycopg2

from .database import DatabaseManager, PostgresDatabaseService, log_sql_event
from .models import Employee, Gender
from .populate import generate_prefixed_employees, generate_random_employees

logger = logging.getLogger(__name__)

Output = Callable[[str], None]

RANDOM_EMPLOYEE_COUNT = 1_000_000
SPECIFIC_EMPLOYEE_COUNT = 100
SPECIFIC_NAME_PREFIX = "F"
PROGRESS_EVERY = 100_000

CREATE_GENDER_TYPE_SQL = """
    DO $$
    BEGIN
        CREATE TYPE employee_gender AS ENUM ('Male', 'Female');
    EXCEPTION
        WHEN duplicate_object THEN NULL;
    END
    $$;
"""

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS "Employees" (
        "ID" SERIAL PRIMARY KEY,
        "FullName" VARCHAR(255) NOT NULL,
        "BirthDate" DATE NOT NULL,
        "Gender" employee_gender NOT NULL
    );
"""

SELECT_ALL_SQL = """
    SELECT "FullName", "BirthDate", "Gender"
    FROM "Employees"
    ORDER BY "FullName";
"""

SELECT_BY_CRITERIA_SQL = """
    SELECT "FullName", "BirthDate", "Gender"
    FROM "Employees"
    WHERE "FullName" LIKE %s AND "Gender" = %s;
"""

CREATE_INDEX_SQL = """
    CREATE INDEX IF NOT EXISTS idx_fullname_gender
    ON "Employees" ("FullName", "Gender");
"""


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so `value` matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def format_employee(employee: Employee, today: Optional[date] = None) -> str:
    age = employee.calculate_age(today)
    return f"{employee.full_name}, {employee.birth_date:%Y-%m-%d}, {employee.gender.value}, {age} years."


def _report_error(out: Output, operation: str, error: Exception):
    logger.error(f"{operation} failed: {error}")
    out(f"Error: {error}")


def create_employee_table(db: DatabaseManager, out: Output = print) -> bool:
    """Create the gender type and the Employees table if they are missing."""
    try:
        with db.get_connection() as conn:
            service = PostgresDatabaseService(conn)
            service.execute(CREATE_GENDER_TYPE_SQL)
            service.execute(CREATE_TABLE_SQL)
    except psycopg2.Error as e:
        _report_error(out, "create_employee_table", e)
        return False

    out("Employees table created.")
    return True


def add_employee(db: DatabaseManager,
                 employee: Employee,
                 today: Optional[date] = None,
                 out: Output = print) -> bool:
    """Print the employee's age and insert the record."""
    age = employee.calculate_age(today)
    out(f"Age of employee {employee.full_name}: {age} years.")

    try:
        with db.get_connection() as conn:
            employee.save(PostgresDatabaseService(conn))
    except psycopg2.Error as e:
        _report_error(out, "add_employee", e)
        return False

    logger.info(f"Inserted employee {employee.full_name}")
    return True


def _print_rows(cur, today: Optional[date], out: Output) -> int:
    count = 0
    for row in cur:
        try:
            employee = Employee.from_row(row)
        except ValueError as e:
            raise ValueError(f"Invalid row for {row[0]!r}: {e}") from None
        out(format_employee(employee, today))
        count += 1
    return count


def show_all_employees(db: DatabaseManager,
                       today: Optional[date] = None,
                       out: Output = print) -> bool:
    """Print every employee ordered by full name."""
    try:
        with db.get_connection() as conn:
            with conn.cursor() as cur:
                log_sql_event("SELECT", "show_all_employees", sql=SELECT_ALL_SQL)
                cur.execute(SELECT_ALL_SQL)
                count = _print_rows(cur, today, out)
    except (psycopg2.Error, ValueError) as e:
        _report_error(out, "show_all_employees", e)
        return False

    logger.info(f"Listed {count} employees")
    return True


def insert_employees(db: DatabaseManager, employees: Iterable[Employee], total: int = None) -> int:
    """Insert employees one statement at a time over a single connection.

    Rows committed before a failure stay committed. Returns the number of
    inserted rows; errors propagate.
    """
    inserted = 0
    start_time = time.time()

    with db.get_connection() as conn:
        service = PostgresDatabaseService(conn)
        for employee in employees:
            employee.save(service)
            inserted += 1

            if inserted % PROGRESS_EVERY == 0:
                elapsed = time.time() - start_time
                rate = inserted / elapsed if elapsed > 0 else 0
                if total:
                    eta = (total - inserted) / rate if rate > 0 else 0
                    logger.info(f"Inserted {inserted}/{total} | "
                                f"Rate: {rate:.1f} rows/sec | ETA: {eta/60:.1f}m")
                else:
                    logger.info(f"Inserted {inserted} | Rate: {rate:.1f} rows/sec")

    return inserted


def fill_employees(db: DatabaseManager,
                   random_count: int = RANDOM_EMPLOYEE_COUNT,
                   specific_count: int = SPECIFIC_EMPLOYEE_COUNT,
                   prefix: str = SPECIFIC_NAME_PREFIX,
                   rng: Optional[random.Random] = None,
                   out: Output = print) -> bool:
    """Insert random employees followed by male employees named with `prefix`."""
    rng = rng or random.Random()
    inserted = 0
    start_time = time.time()

    try:
        inserted += insert_employees(db, generate_random_employees(random_count, rng), random_count)
        logger.info(f"Inserted {random_count} random employees")

        inserted += insert_employees(
            db, generate_prefixed_employees(specific_count, prefix, rng, Gender.MALE), specific_count
        )
        logger.info(f"Inserted {specific_count} employees with prefix '{prefix}'")
    except psycopg2.Error as e:
        _report_error(out, "fill_employees", e)
        return False

    elapsed = time.time() - start_time
    out(f"Inserted {inserted} employees in {elapsed:.2f} seconds.")
    return True


def select_employees_by_criteria(db: DatabaseManager,
                                 prefix: str,
                                 gender: Gender,
                                 today: Optional[date] = None,
                                 out: Output = print,
                                 clock: Callable[[], float] = time.perf_counter) -> bool:
    """Print employees whose name starts with `prefix` and whose gender matches, timed."""
    gender = Gender(gender)
    params = (escape_like(prefix) + "%", gender.value)
    started = clock()

    try:
        with db.get_connection() as conn:
            with conn.cursor() as cur:
                log_sql_event("SELECT", "select_employees_by_criteria",
                              sql=SELECT_BY_CRITERIA_SQL, params=params)
                cur.execute(SELECT_BY_CRITERIA_SQL, params)
                count = _print_rows(cur, today, out)
    except (psycopg2.Error, ValueError) as e:
        _report_error(out, "select_employees_by_criteria", e)
        return False

    elapsed_ms = round((clock() - started) * 1000)
    logger.info(f"Selected {count} employees matching '{prefix}%' / {gender.value}")
    out(f"Query time: {elapsed_ms} ms")
    return True


def optimize_database(db: DatabaseManager, out: Output = print) -> bool:
    """Create the composite (FullName, Gender) index."""
    try:
        with db.get_connection() as conn:
            PostgresDatabaseService(conn).execute(CREATE_INDEX_SQL)
    except psycopg2.Error as e:
        _report_error(out, "optimize_database", e)
        return False

    out("Index created to speed up selection.")
    return True
