import psycopg2
import pytest

from employees.config import Config
from employees.database import DatabaseConfig, DatabaseManager, PostgresDatabaseService


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn

    def execute(self, query, params=None):
        if self.conn.fail:
            raise psycopg2.ProgrammingError("syntax error")
        self.conn.executed.append((query, params))

    def fetchone(self):
        return (1,)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeConnection:
    def __init__(self, fail=False):
        self.fail = fail
        self.closed = 0
        self.executed = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


class FakePool:
    instances = []

    def __init__(self, minconn, maxconn, **kwargs):
        self.minconn = minconn
        self.maxconn = maxconn
        self.kwargs = kwargs
        self.connection = FakeConnection()
        self.returned = []
        self.closed = False
        FakePool.instances.append(self)

    def getconn(self):
        return self.connection

    def putconn(self, conn, close=False):
        self.returned.append((conn, close))

    def closeall(self):
        self.closed = True


@pytest.fixture
def fake_pool(monkeypatch):
    FakePool.instances = []
    monkeypatch.setattr("employees.database.pool.SimpleConnectionPool", FakePool)
    return FakePool


def make_config(**overrides):
    options = dict(database="pmtk", user="root", password="", host="127.0.0.1",
                   port=3307, pool_min=0, pool_max=640)
    options.update(overrides)
    return DatabaseConfig(**options)


def test_config_keeps_empty_password():
    config = make_config()
    assert config.password == ""
    assert config.get_connect_kwargs() == {
        "host": "127.0.0.1",
        "port": 3307,
        "dbname": "pmtk",
        "user": "root",
        "password": "",
    }


def test_config_falls_back_to_settings():
    config = DatabaseConfig()
    assert config.database == Config.DB_NAME
    assert config.port == int(Config.DB_PORT)
    assert config.pool_max == int(Config.DB_POOL_MAX)


def test_default_settings_options():
    assert set(Config.get_db_config()) == {
        "database", "user", "password", "host", "port", "pool-min", "pool-max"
    }


def test_from_options_accepts_dashed_names():
    config = DatabaseConfig.from_options({
        "database": "staff", "user": "app", "password": "secret",
        "host": "db", "port": "5433", "pool-min": 1, "pool-max": 5,
    })
    assert config.describe() == "staff@db:5433"
    assert config.port == 5433
    assert (config.pool_min, config.pool_max) == (1, 5)


def test_from_options_rejects_unknown_option():
    with pytest.raises(ValueError, match="Unknown database option: timeout"):
        DatabaseConfig.from_options({"timeout": 5})


def test_non_numeric_settings_rejected(monkeypatch):
    monkeypatch.setattr(Config, "DB_PORT", "abc")

    with pytest.raises(ValueError, match="port must be an integer; got 'abc'"):
        DatabaseConfig()

    with pytest.raises(ValueError, match="pool-max must be an integer"):
        make_config(pool_max="lots")


@pytest.mark.parametrize("pool_min, pool_max", [(5, 2), (-1, 10), (0, 0)])
def test_invalid_pool_bounds(pool_min, pool_max):
    with pytest.raises(ValueError):
        make_config(pool_min=pool_min, pool_max=pool_max)


def test_pool_created_lazily_with_bounds(fake_pool):
    manager = DatabaseManager(make_config())
    assert fake_pool.instances == []

    with manager.get_connection() as conn:
        assert conn is fake_pool.instances[0].connection

    created = fake_pool.instances[0]
    assert (created.minconn, created.maxconn) == (0, 640)
    assert created.kwargs["dbname"] == "pmtk"
    assert created.returned == [(created.connection, False)]


def test_connection_released_and_rolled_back_on_error(fake_pool):
    manager = DatabaseManager(make_config())

    with pytest.raises(RuntimeError):
        with manager.get_connection():
            raise RuntimeError("boom")

    created = fake_pool.instances[0]
    assert created.connection.rollbacks == 1
    assert len(created.returned) == 1


def test_checkout_failure_propagates(monkeypatch):
    class BrokenPool(FakePool):
        def getconn(self):
            raise psycopg2.OperationalError("could not connect to server")

    monkeypatch.setattr("employees.database.pool.SimpleConnectionPool", BrokenPool)
    manager = DatabaseManager(make_config())

    with pytest.raises(psycopg2.OperationalError):
        with manager.get_connection():
            pass


def test_ping_and_close(fake_pool):
    manager = DatabaseManager(make_config())
    manager.ping()

    created = fake_pool.instances[0]
    assert created.connection.executed == [("SELECT 1", None)]

    manager.close()
    assert created.closed is True


def test_gateway_executes_and_commits():
    conn = FakeConnection()
    PostgresDatabaseService(conn).execute("INSERT INTO t VALUES (%s)", (1,))

    assert conn.executed == [("INSERT INTO t VALUES (%s)", (1,))]
    assert conn.commits == 1


def test_gateway_propagates_errors_without_commit():
    conn = FakeConnection(fail=True)

    with pytest.raises(psycopg2.ProgrammingError):
        PostgresDatabaseService(conn).execute("INSERT INTO t VALUES (1)")
    assert conn.commits == 0
