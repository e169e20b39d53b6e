"""
Tests for the checklist quote engine.
"""

from decimal import Decimal

import pytest

from app import config
from app.domain.quotes.engine import (
    CatalogItem,
    ChecklistVerdict,
    VehicleType,
    applicable_items,
    compute_quote,
    format_amount,
    format_labor_time,
)

BRAKES = CatalogItem(
    id=1,
    category="Brakes",
    item_name="Brake pads",
    estimated_labor_minutes=30,
    estimated_parts_cost=Decimal("10"),
)
CHAIN = CatalogItem(
    id=2,
    category="Drivetrain",
    item_name="Chain",
    estimated_labor_minutes=15,
    estimated_parts_cost=Decimal("5"),
    vehicle_type="bike",
)
BATTERY = CatalogItem(
    id=3,
    category="Electrical",
    item_name="Battery",
    estimated_labor_minutes=45,
    estimated_parts_cost=Decimal("120"),
    vehicle_type="scooter",
)
CATALOG = [BRAKES, CHAIN, BATTERY]


def test_single_defect_quote():
    """Brakes ng, chain ok: 30 minutes at 60/h plus 10 of parts gives 40."""
    quote = compute_quote([BRAKES, CHAIN], {1: "ng", 2: "ok"}, Decimal("60"))

    assert quote.estimated_labor_minutes == 30
    assert quote.labor_cost == Decimal("30.00")
    assert quote.parts_cost == Decimal("10.00")
    assert quote.preliminary_quote == Decimal("40.00")
    assert quote.defect_count == 1


def test_empty_responses_cost_nothing():
    quote = compute_quote(CATALOG, {})

    assert quote.estimated_labor_minutes == 0
    assert quote.preliminary_quote == Decimal("0.00")
    assert quote.defect_count == 0


def test_enum_verdicts_are_accepted():
    quote = compute_quote(CATALOG, {1: ChecklistVerdict.NG, 3: ChecklistVerdict.NG})

    assert quote.estimated_labor_minutes == 75
    assert quote.parts_cost == Decimal("130.00")


def test_repeated_catalog_entry_is_counted_once():
    quote = compute_quote([BRAKES, BRAKES, CHAIN], {1: "ng"})

    assert quote.estimated_labor_minutes == 30
    assert quote.preliminary_quote == Decimal("40.00")


def test_quote_is_idempotent():
    responses = {1: "ng", 2: "ng"}
    assert compute_quote(CATALOG, responses) == compute_quote(CATALOG, responses)


def test_flipping_items_to_ng_never_lowers_the_quote():
    responses = {}
    previous = compute_quote(CATALOG, responses).preliminary_quote
    for item in CATALOG:
        responses[item.id] = "ng"
        current = compute_quote(CATALOG, responses).preliminary_quote
        assert current >= previous
        previous = current


def test_default_rate_comes_from_configuration():
    quote = compute_quote([BRAKES], {1: "ng"})

    assert quote.hourly_rate == config.DEFAULT_HOURLY_RATE
    assert quote == compute_quote([BRAKES], {1: "ng"}, config.DEFAULT_HOURLY_RATE)


def test_hourly_rate_applies_to_labor_only():
    quote = compute_quote([BRAKES], {1: "ng"}, Decimal("80"))

    assert quote.labor_cost == Decimal("40.00")
    assert quote.preliminary_quote == Decimal("50.00")
    assert quote.hourly_rate == Decimal("80")


def test_labor_cost_rounds_to_cents():
    item = CatalogItem(
        id=9,
        category="Misc",
        item_name="Adjustment",
        estimated_labor_minutes=7,
        estimated_parts_cost=Decimal("0"),
    )
    quote = compute_quote([item], {9: "ng"}, Decimal("65"))

    # 7 / 60 * 65 = 7.5833...
    assert quote.labor_cost == Decimal("7.58")


def test_applicable_items_by_vehicle_type():
    assert applicable_items(CATALOG, VehicleType.BIKE) == [BRAKES, CHAIN]
    assert applicable_items(CATALOG, "scooter") == [BRAKES, BATTERY]


@pytest.mark.parametrize(
    "minutes,expected",
    [(0, "0min"), (45, "45min"), (60, "1h"), (120, "2h"), (90, "1h30"), (65, "1h05")],
)
def test_format_labor_time(minutes, expected):
    assert format_labor_time(minutes) == expected


def test_format_amount():
    assert format_amount(Decimal("12.5")) == "12.50 €"
    assert format_amount(None) == "0.00 €"
