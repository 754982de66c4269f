"""Tests for catalog lookup and the per-line cost engine."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from engine.catalog import CatalogQuery, CostCatalog
from engine.costs import SERVICE_QUANTITY_RULES, CostContext, compute_line_cost
from engine.types import (
    ActivityLine,
    Category,
    CostCatalogItem,
    LineType,
    Section,
    SimulationParams,
    Unit,
)


def rig(item, unit, cost, equipment="H-202"):
    return CostCatalogItem(Category.EQUIPMENT, equipment, item, unit, cost, equipment_type=equipment)


def service(subcategory, item, unit, cost, **filters):
    return CostCatalogItem(Category.SERVICES, subcategory, item, unit, cost, **filters)


def casing(item, cost, well_type=None):
    return CostCatalogItem(Category.MATERIALS, "Casing", item, Unit.METER, cost, well_type=well_type)


RIG_ENTRIES = [
    rig("MOVILIZACION", Unit.UNIT, 1_500_000),
    rig("DTM CORTO", Unit.UNIT, 100_000),
    rig("DTM EXCESO > 20KM", Unit.KM, 2000),
    rig("DTM TRAILER CORTO", Unit.HOUR, 20_000),
    rig("DTM TRAILER EXCESO", Unit.HOUR, 1500),
    rig("TARIFA A", Unit.HOUR, 1000),
    rig("TARIFA B", Unit.HOUR, 800),
]

SERVICE_ENTRIES = [
    service("General", "DIESEL", Unit.DAY, 3000),
    service("Direccional", "HERRAMIENTAS DIR", Unit.DAY, 6500, required_for_dir=True),
    service("Medicion", "SINGLE SHOT", Unit.UNIT, 1500, excluded_for_dir=True,
            apply_to_lines=("9", "10")),
    service("Trepanos", "TREPANO 13 1/2", Unit.METER, 250, apply_to_lines=("1",)),
    service("Tijeras", "ALQUILER MENSUAL", Unit.MONTH, 18_000),
    service("Control Geologico", "MUD LOGGING UNIT", Unit.DAY, 1200),
]

CASING_ENTRIES = [
    casing("9-5/8 32.3 STC H40", 95, "Convencional"),
    casing("9-5/8 32.3 TXP-LW H40", 130, "NOC BTC"),
    casing("5-1/2 17 LTC K55", 65),
    casing("5-1/2 17 LTC N80", 85),
    casing("5-1/2 17 TBL N80", 110),
]

CATALOG = CostCatalog(RIG_ENTRIES + SERVICE_ENTRIES + CASING_ENTRIES)

MOVE = ActivityLine("0", "Movilización", "DTM de equipo", LineType.MOVING, base_duration_hours=75)
GUIDE_DRILL = ActivityLine("1", "Guía", "Perfora guía", LineType.DRILLING, rop=25,
                           section=Section.GUIDE)
GUIDE_CASING = ActivityLine("4", "Guía", "Entuba guía", LineType.CASING, casing_speed=7,
                            pipe_length=14, section=Section.GUIDE)
ISO_CASING = ActivityLine("14", "Aislación", "Entuba aislación", LineType.CASING,
                          casing_speed=11, pipe_length=14, section=Section.ISOLATION)

NO_CONTEXT = CostContext(target_depth=0, section_meters=0)


def rows_by_description(line_cost):
    return {row.description: row for row in line_cost.rows}


class TestCatalogQuery:

    def test_soft_equipment_filter(self):
        diesel = SERVICE_ENTRIES[0]
        assert CatalogQuery(equipment_type="H-999").matches(diesel)
        assert not CatalogQuery(equipment_type="H-999").matches(RIG_ENTRIES[0])

    def test_well_type_matches_by_substring(self):
        txp = CASING_ENTRIES[1]
        assert CatalogQuery(well_type="NOC BTC (Pad 3)").matches(txp)
        assert not CatalogQuery(well_type="Convencional").matches(txp)

    def test_find_first_falls_through(self):
        found = CATALOG.find_first(
            CatalogQuery(item="NOT THERE"),
            CatalogQuery(item_contains="K55"),
        )
        assert found.item == "5-1/2 17 LTC K55"

    def test_find_returns_first_in_catalog_order(self):
        found = CATALOG.find(CatalogQuery(category=Category.MATERIALS, item_contains="N80"))
        assert found.item == "5-1/2 17 LTC N80"

    def test_by_category(self):
        assert len(CATALOG.by_category(Category.SERVICES)) == len(SERVICE_ENTRIES)


class TestRigRate:

    def test_rate_a_charged_by_hour(self):
        cost = compute_line_cost(GUIDE_DRILL, 1.0, SimulationParams(), NO_CONTEXT, RIG_ENTRIES)
        row = rows_by_description(cost)["TARIFA A"]
        assert row.quantity == pytest.approx(24)
        assert row.total == pytest.approx(24_000)
        assert row.group == "02.01 EQUIPO"

    def test_rate_b_on_casing_line(self):
        cost = compute_line_cost(GUIDE_CASING, 0.5, SimulationParams(), NO_CONTEXT, RIG_ENTRIES)
        assert rows_by_description(cost)["TARIFA B"].total == pytest.approx(9600)

    def test_unknown_rig_warns_and_charges_nothing(self):
        params = SimulationParams(equipment_type="H-205")
        cost = compute_line_cost(GUIDE_DRILL, 1.0, params, NO_CONTEXT, RIG_ENTRIES)
        assert cost.total_cost == 0
        assert cost.warnings == ("Missing Cost Item: EQUIPO / H-205 / TARIFA A",)

    def test_mobilization_line_has_no_rate(self):
        params = SimulationParams(is_first_well=True)
        cost = compute_line_cost(MOVE, 3.125, params, NO_CONTEXT, RIG_ENTRIES)
        assert "TARIFA A" not in rows_by_description(cost)
        assert "TARIFA B" not in rows_by_description(cost)


class TestMobilization:

    def test_first_well_pays_mobilization_only(self):
        params = SimulationParams(is_first_well=True, dtm=120)
        cost = compute_line_cost(MOVE, 3.125, params, NO_CONTEXT, RIG_ENTRIES)
        assert set(rows_by_description(cost)) == {"MOVILIZACION"}
        assert cost.total_cost == pytest.approx(1_500_000)

    def test_short_move(self):
        params = SimulationParams(dtm=15, trailer_hours=10)
        cost = compute_line_cost(MOVE, 3.125, params, NO_CONTEXT, RIG_ENTRIES)
        assert set(rows_by_description(cost)) == {"DTM CORTO", "DTM TRAILER CORTO"}
        assert cost.total_cost == pytest.approx(100_000 + 10 * 20_000)

    def test_long_move_adds_excess(self):
        params = SimulationParams(dtm=120, trailer_hours=10)
        rows = rows_by_description(compute_line_cost(MOVE, 3.125, params, NO_CONTEXT, RIG_ENTRIES))
        assert rows["DTM EXCESO > 20KM"].quantity == 100
        assert rows["DTM EXCESO > 20KM"].total == pytest.approx(200_000)
        assert rows["DTM TRAILER EXCESO"].total == pytest.approx(15_000)

    def test_exactly_threshold_is_short(self):
        params = SimulationParams(dtm=20)
        rows = rows_by_description(compute_line_cost(MOVE, 3.125, params, NO_CONTEXT, RIG_ENTRIES))
        assert "DTM EXCESO > 20KM" not in rows

    def test_missing_dtm_items_warn(self):
        params = SimulationParams(equipment_type="H-205", dtm=50)
        cost = compute_line_cost(MOVE, 3.125, params, NO_CONTEXT, RIG_ENTRIES)
        assert cost.total_cost == 0
        assert cost.warnings == (
            "Missing: EQUIPO / H-205 / DTM CORTO",
            "Missing: EQUIPO / H-205 / DTM TRAILER CORTO",
            "Missing: EQUIPO / H-205 / DTM EXCESO > 20KM",
            "Missing: EQUIPO / H-205 / DTM TRAILER EXCESO",
        )


class TestServices:

    def test_every_unit_has_a_quantity_rule(self):
        assert set(SERVICE_QUANTITY_RULES) == set(Unit)

    def test_daily_and_per_meter_services(self):
        context = CostContext(target_depth=600, section_meters=600)
        rows = rows_by_description(
            compute_line_cost(GUIDE_DRILL, 2.0, SimulationParams(), context, SERVICE_ENTRIES))
        assert rows["DIESEL"].total == pytest.approx(6000)
        assert rows["TREPANO 13 1/2"].quantity == 600
        assert rows["ALQUILER MENSUAL"].quantity == pytest.approx(2 / 30)
        assert "HERRAMIENTAS DIR" not in rows
        assert "MUD LOGGING UNIT" not in rows

    def test_directional_services(self):
        line_9 = ActivityLine("9", "Aislación", "Arma BHA", LineType.FLAT_TIME, base_duration_hours=12)
        plain = rows_by_description(compute_line_cost(
            line_9, 0.5, SimulationParams(), NO_CONTEXT, SERVICE_ENTRIES))
        directional = rows_by_description(compute_line_cost(
            line_9, 0.5, SimulationParams(is_directional=True), NO_CONTEXT, SERVICE_ENTRIES))
        assert "SINGLE SHOT" in plain and "HERRAMIENTAS DIR" not in plain
        assert "SINGLE SHOT" not in directional and "HERRAMIENTAS DIR" in directional

    def test_unit_service_needs_explicit_line(self):
        cost = compute_line_cost(GUIDE_DRILL, 1.0, SimulationParams(), NO_CONTEXT, SERVICE_ENTRIES)
        assert "SINGLE SHOT" not in rows_by_description(cost)

    def test_geological_control(self):
        params = SimulationParams(has_geological_control=True)
        rows = rows_by_description(
            compute_line_cost(GUIDE_DRILL, 1.0, params, NO_CONTEXT, SERVICE_ENTRIES))
        assert rows["MUD LOGGING UNIT"].total == pytest.approx(1200)

    def test_geological_control_unit_entry_without_whitelist_charges_nothing(self):
        geo_unit = service("Control Geologico", "GEOLOGO", Unit.UNIT, 5000)
        params = SimulationParams(has_geological_control=True)
        cost = compute_line_cost(GUIDE_DRILL, 1.0, params, NO_CONTEXT, [geo_unit])
        assert cost.rows == ()
        assert cost.warnings == ()

    def test_meter_service_only_on_drilling(self):
        meter_svc = service("Trepanos", "TREPANO", Unit.METER, 250, apply_to_lines=("4",))
        context = CostContext(target_depth=600, section_meters=600)
        cost = compute_line_cost(GUIDE_CASING, 0.3, SimulationParams(), context, [meter_svc])
        assert cost.rows == ()

    def test_monthly_service_skipped_on_mobilization(self):
        cost = compute_line_cost(MOVE, 3.125, SimulationParams(), NO_CONTEXT, SERVICE_ENTRIES)
        rows = rows_by_description(cost)
        assert "ALQUILER MENSUAL" not in rows
        assert rows["DIESEL"].quantity == pytest.approx(3.125)

    def test_km_and_hour_services_charge_nothing(self):
        entries = [service("X", "KM SVC", Unit.KM, 10), service("X", "HS SVC", Unit.HOUR, 10)]
        cost = compute_line_cost(GUIDE_DRILL, 1.0, SimulationParams(), NO_CONTEXT, entries)
        assert cost.rows == ()


class TestCasingMaterials:

    def materials(self, line, params, meters):
        context = CostContext(target_depth=meters, section_meters=meters)
        cost = compute_line_cost(line, 0.5, params, context, CATALOG)
        rows = [r for r in cost.rows if r.group == "02.03 MATERIALES"]
        return rows, cost.warnings

    def test_guide_casing_matches_well_type(self):
        rows, _ = self.materials(GUIDE_CASING, SimulationParams(), 600)
        assert [(r.description, r.quantity) for r in rows] == [("9-5/8 32.3 STC H40", 600)]

        rows, _ = self.materials(GUIDE_CASING, SimulationParams(well_type="NOC BTC"), 600)
        assert rows[0].description == "9-5/8 32.3 TXP-LW H40"

    def test_guide_casing_falls_back_to_any_size_match(self):
        rows, warnings = self.materials(GUIDE_CASING, SimulationParams(well_type="Shale X"), 600)
        assert rows[0].description == "9-5/8 32.3 STC H40"
        assert warnings == ()

    def test_guide_casing_missing(self):
        context = CostContext(target_depth=600, section_meters=600)
        cost = compute_line_cost(GUIDE_CASING, 0.5, SimulationParams(), context, RIG_ENTRIES)
        assert "Missing Material: 9-5/8 Casing for Convencional" in cost.warnings

    def test_conventional_shallow_is_all_k55(self):
        rows, _ = self.materials(ISO_CASING, SimulationParams(td_isolation=2400), 2400)
        assert [(r.description, r.quantity) for r in rows] == [("5-1/2 17 LTC K55", 2400)]

    def test_conventional_deep_is_split_string(self):
        rows, _ = self.materials(ISO_CASING, SimulationParams(td_isolation=2600), 2600)
        assert [(r.description, r.quantity) for r in rows] == [
            ("5-1/2 17 LTC N80", 400),
            ("5-1/2 17 LTC K55", 2200),
        ]
        assert sum(r.total for r in rows) == pytest.approx(400 * 85 + 2200 * 65)

    def test_unconventional_uses_premium(self):
        params = SimulationParams(td_isolation=2200, well_type="NOC BTC")
        rows, _ = self.materials(ISO_CASING, params, 2200)
        assert [(r.description, r.quantity) for r in rows] == [("5-1/2 17 TBL N80", 2200)]

    def test_split_string_missing_grade_warns(self):
        entries = RIG_ENTRIES + [casing("5-1/2 17 LTC K55", 65)]
        params = SimulationParams(td_isolation=2600)
        context = CostContext(target_depth=2600, section_meters=2600)
        cost = compute_line_cost(ISO_CASING, 0.5, params, context, entries)
        assert "Missing Material: N80/K55 Combined String" in cost.warnings
        assert all(r.group != "02.03 MATERIALES" for r in cost.rows)

    def test_missing_k55_and_premium_warn(self):
        context = CostContext(target_depth=2200, section_meters=2200)
        cost = compute_line_cost(ISO_CASING, 0.5, SimulationParams(), context, RIG_ENTRIES)
        assert "Missing Material: K55 Casing" in cost.warnings
        cost = compute_line_cost(ISO_CASING, 0.5, SimulationParams(well_type="NOC BTC"),
                                 context, RIG_ENTRIES)
        assert "Missing Material: TBL N80 Casing" in cost.warnings

    def test_grade_lookup_ignores_services_named_like_a_grade(self):
        entries = [service("Inspeccion", "INSPECCION K55", Unit.UNIT, 9000),
                   casing("5-1/2 17 LTC K55", 65)]
        context = CostContext(target_depth=2200, section_meters=2200)
        cost = compute_line_cost(ISO_CASING, 0.5, SimulationParams(), context, entries)
        assert [(r.description, r.quantity) for r in cost.rows] == [("5-1/2 17 LTC K55", 2200)]

    def test_line_total_is_sum_of_rows(self):
        context = CostContext(target_depth=2600, section_meters=2600)
        cost = compute_line_cost(ISO_CASING, 0.5, SimulationParams(td_isolation=2600), context, CATALOG)
        assert cost.total_cost == pytest.approx(sum(r.total for r in cost.rows))
