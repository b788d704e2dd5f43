"""Tests for PropertyTable declaration storage and classification."""

import pytest

from covenant.contracts.enums import Presence
from covenant.contracts.errors import ContractDefinitionError
from covenant.core.context import ExecutionContext
from covenant.core.property_table import PropertyTable


def _handler(command: object, violation: object) -> None:
    pass


@pytest.fixture
def table() -> PropertyTable:
    table = PropertyTable()
    table.declare("result", Presence.PROVIDED)
    table.declare("locale", Presence.PERMITTED, default="default_locale")
    table.declare("user_id", Presence.EXPECTED)
    table.declare("account_id", "expected")
    return table


class TestDeclare:
    def test_invalid_presence_raises(self) -> None:
        with pytest.raises(ContractDefinitionError, match="Invalid value 'foo' for option presence"):
            PropertyTable().declare("p", "foo")

    def test_new_property_requires_presence(self) -> None:
        with pytest.raises(ContractDefinitionError, match="must be declared with a presence"):
            PropertyTable().declare("p")

    @pytest.mark.parametrize("name", ["", "two words", "1abc", "a-b"])
    def test_rejects_non_identifiers(self, name: str) -> None:
        with pytest.raises(ContractDefinitionError, match="Invalid property name"):
            PropertyTable().declare(name, Presence.EXPECTED)

    def test_rejects_literal_default(self) -> None:
        with pytest.raises(ContractDefinitionError):
            PropertyTable().declare("p", Presence.PERMITTED, default=7)  # type: ignore[arg-type]

    def test_redeclaring_merges_instead_of_duplicating(self) -> None:
        table = PropertyTable()
        table.declare("p", Presence.PERMITTED, default="make_p")
        table.declare("p", Presence.PERMITTED, on_violation=_handler)

        assert len(table) == 1
        definition = table.get("p")
        assert definition is not None
        assert definition.default == "make_p"
        assert definition.on_violation is _handler

    def test_redeclaring_can_change_presence(self) -> None:
        table = PropertyTable()
        table.declare("p", Presence.PERMITTED)
        table.declare("p", Presence.EXPECTED)
        assert table.expected() == ["p"]
        assert table.permitted() == []

    def test_set_violation_handler_on_undeclared_raises(self) -> None:
        with pytest.raises(ContractDefinitionError, match="undeclared property 'ghost'"):
            PropertyTable().set_violation_handler("ghost", _handler)


class TestViews:
    def test_views_filter_by_presence(self, table: PropertyTable) -> None:
        assert table.expected() == ["user_id", "account_id"]
        assert table.permitted() == ["locale"]
        assert table.provided() == ["result"]

    def test_all_is_expected_first(self, table: PropertyTable) -> None:
        assert table.all() == ["user_id", "account_id", "locale", "result"]

    def test_expected_and_permitted(self, table: PropertyTable) -> None:
        assert table.expected_and_permitted() == ["user_id", "account_id", "locale"]

    def test_iteration_preserves_insertion_order(self, table: PropertyTable) -> None:
        assert [d.name for d in table] == ["result", "locale", "user_id", "account_id"]
        assert "locale" in table
        assert "ghost" not in table


class TestContextQueries:
    def test_missing_expected_in_declaration_order(self, table: PropertyTable) -> None:
        assert table.missing_expected(ExecutionContext()) == ["user_id", "account_id"]
        assert table.missing_expected(ExecutionContext(account_id=1)) == ["user_id"]

    def test_none_value_counts_as_present(self, table: PropertyTable) -> None:
        context = ExecutionContext(user_id=None, account_id=None)
        assert table.missing_expected(context) == []

    def test_undeclared_excludes_inputs(self, table: PropertyTable) -> None:
        context = ExecutionContext(user_id=1, locale="en", result="early", extra=True)
        # A provided name arriving as input is not a declared input
        assert table.undeclared(context) == ["result", "extra"]

    def test_default_for(self, table: PropertyTable) -> None:
        assert table.default_for("locale") == "default_locale"
        assert table.default_for("user_id") is None
        with pytest.raises(KeyError):
            table.default_for("ghost")

    def test_on_violation_for(self) -> None:
        table = PropertyTable()
        table.declare("p", Presence.EXPECTED, on_violation=_handler)
        assert table.on_violation_for("p") is _handler
        assert table.on_violation_for("ghost") is None


class TestCopyAndDescribe:
    def test_copy_is_independent(self, table: PropertyTable) -> None:
        clone = table.copy()
        clone.declare("extra", Presence.PROVIDED)

        assert "extra" in clone
        assert "extra" not in table
        assert clone.get("locale") is table.get("locale")

    def test_describe(self, table: PropertyTable) -> None:
        rows = table.describe()
        assert [row["name"] for row in rows] == table.all()
        assert rows[2] == {"name": "locale", "presence": "permitted", "default": "method", "on_violation": False}
