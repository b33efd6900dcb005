from db_introspector.shared.errors import (
    CatalogError,
    ConfigError,
    DatabaseConnectionError,
    EmptySchemaError,
    IntrospectorError,
    UnsupportedDialectError,
)


class TestConfigError:
    def test_init_no_path(self):
        error = ConfigError("test message")
        assert str(error) == "test message"
        assert error.config_path is None
        assert error.key is None

    def test_init_with_path(self):
        error = ConfigError("test message", "introspector.yaml")
        assert str(error) == "[introspector.yaml] test message"
        assert error.config_path == "introspector.yaml"

    def test_init_with_key_and_path(self):
        error = ConfigError("invalid value", "introspector.yaml", "schema")
        assert str(error) == "[introspector.yaml] Key 'schema': invalid value"
        assert error.key == "schema"


class TestDatabaseConnectionError:
    def test_init(self):
        error = DatabaseConnectionError("refused", "postgres://localhost/app")
        assert str(error) == "refused"
        assert error.target == "postgres://localhost/app"

    def test_is_connection_error(self):
        error = DatabaseConnectionError("refused")
        assert isinstance(error, ConnectionError)
        assert isinstance(error, IntrospectorError)


class TestUnsupportedDialectError:
    def test_init(self):
        error = UnsupportedDialectError("sqlite")
        assert str(error).startswith("Dialect 'sqlite' is not supported")
        assert error.dialect == "sqlite"

    def test_is_not_connection_error(self):
        assert not isinstance(UnsupportedDialectError("sqlite"), ConnectionError)


class TestCatalogError:
    def test_init(self):
        error = CatalogError("bad value")
        assert str(error) == "bad value"
        assert error.table_name is None

    def test_init_with_table(self):
        error = CatalogError("bad value", "users")
        assert str(error) == "Table 'users': bad value"


class TestEmptySchemaError:
    def test_init(self):
        error = EmptySchemaError("public")
        assert str(error) == "Schema 'public' contains no tables"
        assert error.schema == "public"
