import pytest

from supply_gateway.errors import LocalValidationError
from supply_gateway.workflow import (
    OrderStatus,
    StatusFilter,
    parse_filter,
    parse_order_id,
    parse_quantity,
    parse_status,
    validate_new_order,
)


@pytest.mark.parametrize("literal", ["PENDING", "PROCESSING", "SHIPPED", "CANCELLED"])
def test_filter_attaches_status_literal(literal):
    assert parse_filter(literal).query_params() == {"status": literal}


@pytest.mark.parametrize("value", [None, "", "  ", "ALL", "all"])
def test_all_filter_omits_parameter(value):
    f = parse_filter(value)
    assert f is StatusFilter.ALL
    assert f.query_params() == {}
    assert f.status is None


def test_filter_is_case_insensitive():
    assert parse_filter("shipped") is StatusFilter.SHIPPED
    assert StatusFilter.SHIPPED.status is OrderStatus.SHIPPED


def test_unknown_filter_rejected():
    with pytest.raises(LocalValidationError):
        parse_filter("LOST")


def test_parse_status_accepts_the_four_literals():
    assert [parse_status(s.value) for s in OrderStatus] == list(OrderStatus)


@pytest.mark.parametrize("value", ["UNKNOWN", "shipped", "", None, 3])
def test_parse_status_rejects_anything_else(value):
    with pytest.raises(LocalValidationError):
        parse_status(value)


def test_no_transition_graph_is_enforced():
    # PENDING -> SHIPPED is the Order service's call, not ours
    assert parse_status("SHIPPED") is OrderStatus.SHIPPED


@pytest.mark.parametrize("value,expected", [(3, 3), (1, 1), (3.0, 3), ("3", 3), (" 7 ", 7)])
def test_quantity_accepted(value, expected):
    assert parse_quantity(value) == expected


@pytest.mark.parametrize("value", [0, -1, 1.5, "1.5", "", "abc", None, True, float("nan"), "inf"])
def test_quantity_rejected(value):
    with pytest.raises(LocalValidationError):
        parse_quantity(value)


def test_validate_new_order_trims_name():
    assert validate_new_order("  Widget  ", 3) == ("Widget", 3)


@pytest.mark.parametrize("name,qty", [("", 1), ("   ", 1), ("Widget", 0), ("Widget", 1.5), (None, 1)])
def test_validate_new_order_rejects(name, qty):
    with pytest.raises(LocalValidationError) as exc:
        validate_new_order(name, qty)
    assert exc.value.status_code == 400


def test_parse_order_id():
    assert parse_order_id("42") == 42
    with pytest.raises(LocalValidationError):
        parse_order_id("abc")


@pytest.mark.parametrize("value", ["9007199254740993", " 12345678901234567890 ", 9007199254740993])
def test_large_integer_quantities_are_exact(value):
    assert parse_quantity(value) == int(str(value).strip())


@pytest.mark.parametrize("value", [float(2 ** 53 + 2), "1e17"])
def test_float_quantities_beyond_exact_range_rejected(value):
    with pytest.raises(LocalValidationError):
        parse_quantity(value)


def test_integral_float_strings_still_accepted():
    assert parse_quantity("3.0") == 3
    assert parse_quantity(float(2 ** 53)) == 2 ** 53
