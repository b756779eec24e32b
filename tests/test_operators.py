"""
Tests for the operator catalog and the case-insensitive, count and in-list
builder methods.
"""

import pytest

from filterql.builder import QueryBuilder
from filterql.errors import InvalidOperatorError, UnsupportedValueError
from filterql.ir.operators import (
    ARRAY_OPERATORS,
    CASE_INSENSITIVE_OPERATORS,
    COUNT_OPERATORS,
    OPERATOR_LITERALS,
    OPERATORS,
    PATTERN_OPERATORS,
    QueryOperator,
)
from filterql.ir.tokens import ArrayConditionToken


def qb() -> QueryBuilder:
    return QueryBuilder(False, False)


class TestCatalog:
    """The catalog is closed and literal tokens never collide."""

    def test_literals_are_unique(self):
        literals = [op.value for op in QueryOperator]
        assert len(literals) == len(set(literals)) == 36
        assert OPERATOR_LITERALS == set(literals)

    def test_reverse_map(self):
        assert OPERATORS["=="] == "EQUALS"
        assert OPERATORS["!^^*"] == "NOT_IN_CASE_INSENSITIVE"
        assert OPERATORS["#!="] == "COUNT_NOT_EQUALS"

    def test_families(self):
        assert len(CASE_INSENSITIVE_OPERATORS) == 12
        assert len(COUNT_OPERATORS) == 6
        assert len(ARRAY_OPERATORS) == 4
        assert all(op.value.endswith("*") for op in CASE_INSENSITIVE_OPERATORS)
        assert QueryOperator.CONTAINS in PATTERN_OPERATORS
        assert QueryOperator.EQUALS not in PATTERN_OPERATORS

    def test_predicates(self):
        assert QueryOperator.EQUALS_CASE_INSENSITIVE.is_case_insensitive
        assert not QueryOperator.EQUALS.is_case_insensitive
        assert QueryOperator.COUNT_EQUALS.is_count
        assert QueryOperator.NOT_IN.is_array
        assert QueryOperator.SOUNDS_LIKE.is_pattern
        assert not QueryOperator.HAS.is_pattern

    def test_from_literal(self):
        assert QueryOperator.from_literal("@=*") is QueryOperator.CONTAINS_CASE_INSENSITIVE
        with pytest.raises(ValueError):
            QueryOperator.from_literal("??")

    def test_str_is_literal(self):
        assert str(QueryOperator.IN) == "^^"


class TestCaseInsensitiveOperators:
    """Case-insensitive twins use "*"-suffixed literals."""

    @pytest.mark.parametrize(
        "method, prop, value, expected",
        [
            ("equals_case_insensitive", "Username", "admin", 'Username ==* "admin"'),
            ("not_equals_case_insensitive", "Email", "admin@example.com", 'Email !=* "admin@example.com"'),
            ("starts_with_case_insensitive", "City", "los", 'City _=* "los"'),
            ("does_not_start_with_case_insensitive", "Country", "can", 'Country !_=* "can"'),
            ("ends_with_case_insensitive", "Filename", ".PDF", 'Filename _-=* ".PDF"'),
            ("does_not_end_with_case_insensitive", "Domain", ".COM", 'Domain !_-=* ".COM"'),
            ("contains_case_insensitive", "Description", "Lorem Ipsum", 'Description @=* "Lorem Ipsum"'),
            ("does_not_contain_case_insensitive", "Notes", "Temporary Data", 'Notes !@=* "Temporary Data"'),
            ("has_case_insensitive", "Tags", "Urgent", 'Tags ^$* "Urgent"'),
            ("does_not_have_case_insensitive", "Categories", "Obsolete", 'Categories !^$* "Obsolete"'),
        ],
    )
    def test_operator(self, method, prop, value, expected):
        builder = qb()
        getattr(builder, method)(prop, value)
        assert builder.build() == expected

    def test_pattern_twins_force_quotes(self):
        assert qb().contains_case_insensitive("Code", 7).build() == 'Code @=* "7"'

    def test_equality_twin_does_not_force_quotes(self):
        assert qb().equals_case_insensitive("Code", 7).build() == "Code ==* 7"


class TestCountOperators:
    """Count operators compare a cardinality and accept numbers only."""

    @pytest.mark.parametrize(
        "method, prop, value, expected",
        [
            ("count_greater_than", "Comments", 5, "Comments #> 5"),
            ("count_less_than", "Likes", 100, "Likes #< 100"),
            ("count_greater_than_or_equal", "Shares", 50, "Shares #>= 50"),
            ("count_less_than_or_equal", "Views", 200, "Views #<= 200"),
            ("count_equals", "Attachments", 3, "Attachments #== 3"),
            ("count_not_equals", "Tags", 2, "Tags #!= 2"),
            ("equals_case_count", "Tags", 2, "Tags #== 2"),
            ("not_equals_case_count", "Tags", 2, "Tags #!= 2"),
            ("greater_than_case_count", "Tags", 2, "Tags #> 2"),
            ("less_than_case_count", "Tags", 2, "Tags #< 2"),
            ("greater_than_or_equal_case_count", "Tags", 2, "Tags #>= 2"),
            ("less_than_or_equal_case_count", "Tags", 2, "Tags #<= 2"),
        ],
    )
    def test_operator(self, method, prop, value, expected):
        builder = qb()
        getattr(builder, method)(prop, value)
        assert builder.build() == expected

    def test_none_is_skipped(self):
        assert qb().count_equals("Tags", None).build() == ""

    @pytest.mark.parametrize("value", ["5", True, [5]])
    def test_non_numeric_rejected(self, value):
        builder = qb()
        with pytest.raises(UnsupportedValueError):
            builder.count_equals("Tags", value)
        assert builder.get_tokens() == ()


class TestInListOperators:
    """In-list conditions render as `property op [v1,v2]`."""

    def test_in(self):
        q = qb().in_("Status", ["active", "pending", "closed"]).build()
        assert q == 'Status ^^ ["active","pending","closed"]'

    def test_not_in(self):
        assert qb().not_in("Id", [1, 2]).build() == "Id !^^ [1,2]"

    def test_case_insensitive_variants_record_tokens(self):
        builder = qb().in_case_insensitive("Status", ["Active", "Pending", "Closed"])
        assert builder.build() == 'Status ^^* ["Active","Pending","Closed"]'
        assert builder.get_tokens() == (
            ArrayConditionToken(
                "Status",
                QueryOperator.IN_CASE_INSENSITIVE,
                ("Active", "Pending", "Closed"),
            ),
        )

        builder = qb().not_in_case_insensitive("Status", ["x"])
        assert builder.build() == 'Status !^^* ["x"]'
        assert len(builder.get_tokens()) == 1

    def test_none_entries_are_dropped(self):
        builder = qb().in_("Id", [1, None, 2])
        assert builder.build() == "Id ^^ [1,2]"
        assert builder.get_tokens()[0].values == (1, 2)

    @pytest.mark.parametrize("values", [None, [], [None, None]])
    def test_empty_lists_are_skipped(self, values):
        builder = qb().equals("A", 1).and_().in_("Id", values)
        assert builder.build() == "A == 1"
        assert len(builder.get_tokens()) == 2

    def test_mixed_value_types(self):
        q = qb().in_("Mixed", ["a", 1, True, 2.5]).build()
        assert q == 'Mixed ^^ ["a",1,true,2.5]'

    def test_values_are_escaped(self):
        q = qb().in_("Name", ['say "hi"']).build()
        assert q == 'Name ^^ ["say \\"hi\\""]'

    def test_in_list_rejects_scalar_operator(self):
        with pytest.raises(InvalidOperatorError):
            qb().in_list("Id", "==", [1])

    def test_in_list_accepts_literal(self):
        assert qb().in_list("Id", "!^^", [3]).build() == "Id !^^ [3]"

    def test_string_is_not_a_list(self):
        with pytest.raises(UnsupportedValueError):
            qb().in_("Status", "active")
