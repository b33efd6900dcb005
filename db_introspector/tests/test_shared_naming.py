import pytest

from db_introspector.shared.naming import (
    PYTHON_KEYWORDS,
    contains_whitespace,
    is_mangled_name,
    is_reserved_name,
    is_valid_field_name,
    starts_with_digit,
    to_pascal_case,
)


class TestToPascalCase:
    @pytest.mark.parametrize(
        "input_str,expected",
        [
            ("order_items", "OrderItems"),
            ("some_table", "SomeTable"),
            ("a_table", "ATable"),
            ("order-items", "OrderItems"),
            ("order items", "OrderItems"),
            ("orderItems", "OrderItems"),
            ("OrderItems", "OrderItems"),
            ("USERS", "Users"),
            ("single", "Single"),
            ("1table", "1table"),
            ("sys$log", "Sys$log"),
            ("__double__", "Double"),
            ("", ""),
            ("_", ""),
        ],
    )
    def test_to_pascal_case(self, input_str, expected):
        assert to_pascal_case(input_str) == expected

    def test_to_pascal_case_caching(self):
        result1 = to_pascal_case("order_items")
        result2 = to_pascal_case("order_items")
        assert result1 == result2 == "OrderItems"


class TestPredicates:
    def test_starts_with_digit(self):
        assert starts_with_digit("1column")
        assert not starts_with_digit("column1")
        assert not starts_with_digit("")

    def test_contains_whitespace(self):
        assert contains_whitespace("my column")
        assert contains_whitespace("tab\there")
        assert not contains_whitespace("my_column")

    def test_is_reserved_name(self):
        assert is_reserved_name("from")
        assert is_reserved_name("class")
        assert not is_reserved_name("from_date")
        assert not is_reserved_name("From")

    def test_is_mangled_name(self):
        assert is_mangled_name("__secret")
        assert is_mangled_name("__secret_")
        assert not is_mangled_name("__init__")
        assert not is_mangled_name("_private")
        assert not is_mangled_name("secret__")

    def test_keywords_include_from(self):
        assert "from" in PYTHON_KEYWORDS


class TestIsValidFieldName:
    @pytest.mark.parametrize("name", ["id", "column_one", "_private", "from_date", "Column2", "__dunder__"])
    def test_valid(self, name):
        assert is_valid_field_name(name)

    @pytest.mark.parametrize(
        "name", ["1column", "my column", "from", "import", "a-b", "price$", "", "__secret"]
    )
    def test_invalid(self, name):
        assert not is_valid_field_name(name)
