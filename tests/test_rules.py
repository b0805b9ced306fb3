from __future__ import annotations

import logging
from itertools import combinations

import pytest

from per_diem.rates.rules import matching_rule


def test_us_state_department_row(engine):
    record = {
        "Country": "Afghanistan",
        "Location": "Kabul",
        "Season Code": "",
        "Lodging": "$150",
        "Meals & Incidentals": "$79",
        "Per Diem": "$229",
    }
    assert engine.compute_total(record) == 229.0
    assert engine.compute_room_rate(record) == 150.0
    assert engine.compute_meals_and_incidentals(record) == 79.0


def test_per_diem_only_row_is_total_without_breakdown(engine):
    record = {"Country": "Afghanistan", "Location": "Kabul", "Per Diem": "162", "Currency": "USD"}

    normalized = engine.process_row("un", record)
    assert normalized.slug == "afghanistan-kabul"
    assert normalized.total == 162.0
    assert normalized.room_rate is None
    assert normalized.meals_and_incidentals is None
    assert normalized.is_determinate()


def test_first_sixty_days_column_ignores_stated_currency(engine):
    record = {"Country": "Kenya", "First 60 Days US$": "300", "Per Diem": "999", "Currency": "EUR"}
    assert engine.compute_total(record) == 300.0


def test_eu_amount_and_daily_allowance_are_both_euros(engine):
    record = {"Country": "France", "Location": "Paris", "Amount (Euros)": "150", "Daily allowance": "50"}

    assert engine.compute_total(record) == pytest.approx(150 / 0.9 + 50 / 0.9)
    assert engine.compute_meals_and_incidentals(record) == pytest.approx(50 / 0.9)
    assert engine.compute_room_rate(record) is None


def test_eu_hotel_ceiling_row(engine):
    record = {"Country": "Belgium", "Hotel ceiling": "180", "Daily allowance": "90", "Currency": "GBP"}

    assert engine.compute_total(record) == pytest.approx(300.0)
    assert engine.compute_room_rate(record) == pytest.approx(200.0)
    assert engine.compute_meals_and_incidentals(record) == pytest.approx(100.0)


def test_unparseable_daily_allowance_poisons_total(engine):
    record = {"Country": "Belgium", "Hotel ceiling": "180", "Daily allowance": "n/a"}

    normalized = engine.process_row("eu", record)
    assert normalized.total is None
    assert normalized.meals_and_incidentals is None
    assert normalized.room_rate == pytest.approx(200.0)
    assert not normalized.is_determinate()


def test_un_room_share_of_dsa(engine):
    record = {"Country": "Kenya", "Location": "Nairobi", "Per Diem": "200", "Currency": "USD", "Room as % of DSA": "40"}

    assert engine.compute_total(record) == 200.0
    assert engine.compute_room_rate(record) == pytest.approx(80.0)
    assert engine.compute_meals_and_incidentals(record) == pytest.approx(120.0)


def test_un_unparseable_percentage_does_not_fall_through(engine):
    record = {"Country": "Kenya", "Per Diem": "200", "Room as % of DSA": "forty", "Lodging": "150"}

    assert engine.compute_total(record) == 200.0
    assert engine.compute_room_rate(record) is None
    assert engine.compute_meals_and_incidentals(record) is None


def test_canada_total_counts_as_meals_and_incidentals(engine):
    record = {
        "Country": "Canada",
        "Location": "Toronto",
        "GRAND TOTAL (taxes included)": "125.00",
        "Incidental Amount": "17.30",
        "Currency": "CAD",
    }

    assert engine.compute_total(record) == pytest.approx(100.0)
    assert engine.compute_room_rate(record) == 0.0
    assert engine.compute_meals_and_incidentals(record) == pytest.approx(100.0)


def test_uk_residual_plus_room_rate(engine):
    record = {"Country": "Spain", "Location": "Madrid", "Room rate": "80", "Total residual": "40", "Currency": "GBP"}

    assert engine.compute_total(record) == pytest.approx(150.0)
    assert engine.compute_room_rate(record) == pytest.approx(100.0)
    assert engine.compute_meals_and_incidentals(record) == pytest.approx(50.0)


def test_uk_room_rate_code_inside_cell_wins_over_currency_column(engine):
    record = {"Country": "Spain", "Room rate": "(EUR) 90", "Total residual": "40", "Currency": "GBP"}

    assert engine.compute_room_rate(record) == pytest.approx(100.0)
    assert engine.compute_total(record) == pytest.approx(150.0)


def test_uk_unparseable_room_rate_is_not_added(engine):
    record = {"Country": "Spain", "Room rate": "*", "Total residual": "40", "Currency": "GBP"}

    assert engine.compute_total(record) == pytest.approx(50.0)
    assert engine.compute_room_rate(record) is None


def test_unknown_currency_defaults_to_dollars(engine):
    record = {"Country": "Narnia", "Per Diem": "75", "Currency": "XYZ"}
    assert engine.compute_total(record) == 75.0


def test_row_without_money_columns_is_not_determinate(engine):
    normalized = engine.process_row("us", {"Country": "Atlantis", "Location": "Capital", "Currency": "USD"})

    assert normalized.total is None
    assert normalized.meals_and_incidentals is None
    assert normalized.room_rate is None
    assert not normalized.is_determinate()


def test_process_row_copies_identifying_columns(engine):
    record = {"Country": "Japan", "Location": "JAPAN", "Season Code": "S1", "Per Diem": "¥15,000", "Currency": "JPY"}

    normalized = engine.process_row("un", record)
    assert normalized.jurisdiction == "un"
    assert normalized.slug == "japan"
    assert normalized.country == "Japan"
    assert normalized.location == "JAPAN"
    assert normalized.season == "S1"
    assert normalized.total == pytest.approx(100.0)


def test_total_column_priority(engine):
    record = {"Per Diem": "100", "Total residual": "200", "Hotel ceiling": "300"}
    assert engine.compute_total(record) == 100.0

    record = {"Total residual": "200", "GRAND TOTAL (taxes included)": "300"}
    assert engine.compute_total(record) == 200.0


def test_un_percentage_beats_eu_hotel_ceiling(engine):
    record = {"Per Diem": "200", "Room as % of DSA": "25", "Hotel ceiling": "180"}

    assert matching_rule(engine.room_rate_rules, record).jurisdiction == "UN"
    assert engine.compute_room_rate(record) == pytest.approx(50.0)


ROOM_SAMPLES = {
    "Room as % of DSA": "40",
    "Hotel ceiling": "180",
    "Incidental Amount": "17.30",
    "Lodging": "150",
    "Room rate": "80",
}

MEALS_SAMPLES = {
    "Meals & Incidentals": "79",
    "Daily allowance": "90",
    "Room as % of DSA": "40",
    "Incidental Amount": "17.30",
    "Total residual": "40",
}


def _rule_pairs(rules_attr: str):
    columns = {
        "room_rate_rules": list(ROOM_SAMPLES),
        "meals_rules": list(MEALS_SAMPLES),
    }[rules_attr]
    return [(rules_attr, earlier, later) for earlier, later in combinations(columns, 2)]


@pytest.mark.parametrize(
    ("rules_attr", "earlier", "later"),
    _rule_pairs("room_rate_rules") + _rule_pairs("meals_rules"),
)
def test_earlier_column_wins_dispatch(engine, rules_attr, earlier, later):
    samples = ROOM_SAMPLES if rules_attr == "room_rate_rules" else MEALS_SAMPLES
    rules = getattr(engine, rules_attr)
    record = {"Per Diem": "200", earlier: samples[earlier], later: samples[later]}

    assert matching_rule(rules, record).column == earlier


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        ({"Per Diem": "200", "Room as % of DSA": "40", "Lodging": "150"}, 80.0),
        ({"Hotel ceiling": "180", "Incidental Amount": "17.30"}, 200.0),
        ({"Per Diem": "200", "Incidental Amount": "17.30", "Lodging": "150"}, 0.0),
        ({"Lodging": "150", "Room rate": "80", "Currency": "GBP"}, 150.0),
    ],
)
def test_room_rate_value_follows_priority(engine, record, expected):
    assert engine.compute_room_rate(record) == pytest.approx(expected)


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        ({"Meals & Incidentals": "79", "Daily allowance": "90"}, 79.0),
        ({"Per Diem": "200", "Daily allowance": "90", "Room as % of DSA": "40"}, 100.0),
        ({"Per Diem": "200", "Room as % of DSA": "40", "Incidental Amount": "17.30"}, 120.0),
        ({"Per Diem": "200", "Incidental Amount": "17.30", "Total residual": "40"}, 200.0),
    ],
)
def test_meals_value_follows_priority(engine, record, expected):
    assert engine.compute_meals_and_incidentals(record) == pytest.approx(expected)


def test_blank_cells_do_not_count_as_present(engine):
    record = {"Room as % of DSA": "", "Hotel ceiling": "", "Lodging": "150", "Per Diem": "229"}

    assert matching_rule(engine.room_rate_rules, record).column == "Lodging"
    assert engine.compute_room_rate(record) == 150.0


def test_matched_rule_is_logged_with_its_jurisdiction(engine, caplog):
    caplog.set_level(logging.DEBUG, logger="per_diem.rates.rules")
    record = {"Per Diem": "200", "Room as % of DSA": "25", "Lodging": "150"}

    engine.compute_room_rate(record)
    assert "Applying UN rule on column 'Room as % of DSA'" in caplog.text


def test_euro_columns_override_first_sixty_days_currency(engine):
    # The dollar column still supplies the amount, but the euro columns decide its currency.
    record = {"Country": "Kenya", "First 60 Days US$": "300", "Amount (Euros)": "150", "Currency": "GBP"}
    assert engine.compute_total(record) == pytest.approx(300 / 0.9)

    record = {"Country": "Kenya", "First 60 Days US$": "300", "Daily allowance": "90", "Currency": "GBP"}
    assert engine.compute_total(record) == pytest.approx(300 / 0.9 + 100.0)
