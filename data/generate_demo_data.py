"""
Demo data generator for the Drilling Cost Planner.

Produces 3 deterministic CSV files:
    - program_template.csv   (18 lines, items 0-17 of the drilling program)
    - cost_catalog.csv       (two rigs + services + casing materials)
    - activity_schedule.csv  (25 wells of the 2026 campaign)

List-valued columns (apply_to_lines) are stored pipe-separated.
"""

from datetime import date, timedelta
from pathlib import Path

import pandas as pd

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent

PROGRAM_COLUMNS = [
    "id", "phase", "activity", "type", "base_duration_hours", "rop",
    "casing_speed", "pipe_length", "tripping_speed", "section", "is_offline_capable",
]

# (id, phase, activity, type, params, section, offline)
PROGRAM = [
    ("0", "Movilización", "DTM de equipo", "MOVING", {"base_duration_hours": 75}, None, False),
    ("1", "Guía", 'Perfora c/trépano 13-1/2" hasta TD (+ service)', "DRILLING", {"rop": 25}, "GUIDE", False),
    ("2", "Guía", "Circula + saca a superficie. Mbra de Calibre. Desarma BHA.", "TRIPPING", {"tripping_speed": 82}, "GUIDE", False),
    ("3", "Guía", "Prepara para entubar", "FLAT_TIME", {"base_duration_hours": 2.5}, "GUIDE", False),
    ("4", "Guía", 'Entuba cañería guia de 9 5/8"', "CASING", {"casing_speed": 7, "pipe_length": 14}, "GUIDE", False),
    ("5", "Guía", "Circula, prepara para cementar y cementa + top job", "CEMENTING", {"base_duration_hours": 4.5}, "GUIDE", False),
    ("6", "Guía", 'Recupera caño de maniobra + instala sección "A"', "FLAT_TIME", {"base_duration_hours": 2.75}, "GUIDE", False),
    ("7", "Guía", "Monta BOP y lineas de choke y kill", "FLAT_TIME", {"base_duration_hours": 4}, "GUIDE", False),
    ("8", "Guía", "Prueba BOP", "FLAT_TIME", {"base_duration_hours": 4}, "GUIDE", True),
    ("9", "Aislación", 'Arma BHA con trepano de 8 3/4" / MDF / Stb / Tijera...', "FLAT_TIME", {"base_duration_hours": 12.75}, "ISOLATION", False),
    ("10", "Aislación", "Perfora hasta TD (+ Circulaciones + Registros + Service)", "DRILLING", {"rop": 30}, "ISOLATION", False),
    ("11", "Aislación", "Circula + Mbra de Calibre - saca hasta zto 9-5/8\" - baja a TD...", "TRIPPING", {"tripping_speed": 130}, "ISOLATION", False),
    ("12", "Aislación", "Circula y saca total para perfilar", "TRIPPING", {"tripping_speed": 160}, "ISOLATION", False),
    ("13", "Aislación", "Acondiciona + Perfila + Desmonta", "LOGGING", {"base_duration_hours": 24}, "ISOLATION", False),
    ("14", "Aislación", 'Prepara + Entuba Csg de 5 1/2"', "CASING", {"casing_speed": 11, "pipe_length": 14}, "ISOLATION", False),
    ("15", "Aislación", "Circula en el fondo. Acondiciona Lodo", "FLAT_TIME", {"base_duration_hours": 2.25}, "ISOLATION", False),
    ("16", "Aislación", "Prepara equipo y cementa. Desmonta Cía de cementación.", "CEMENTING", {"base_duration_hours": 5}, "ISOLATION", False),
    ("17", "Aislación", "Levanta BOP + Asienta Csg 5-1/2\" en cuñas + Empaqueta...", "FLAT_TIME", {"base_duration_hours": 6}, "ISOLATION", False),
]

CATALOG_COLUMNS = [
    "category", "subcategory", "item", "unit", "cost", "equipment_type",
    "well_type", "required_for_dir", "excluded_for_dir", "apply_to_lines",
]

RIG_RATES = {
    "H-202": {
        "MOVILIZACION": ("UNI", 1500000.00),
        "DTM CORTO": ("UNI", 107932.58),
        "DTM EXCESO > 20KM": ("KM", 2158.65),
        "DTM TRAILER CORTO": ("HS", 20000.00),
        "DTM TRAILER EXCESO": ("HS", 1535.63),
        "TARIFA A": ("HS", 1458.85),
        "TARIFA B": ("HS", 1382.06),
        "TARIFA C": ("HS", 1382.06),  # fuel, already inside A/B
        "VARIOS": ("UNI", 72171.54),
    },
    "H-203": {
        "MOVILIZACION": ("UNI", 1550000.00),
        "DTM CORTO": ("UNI", 110000.00),
        "DTM EXCESO > 20KM": ("KM", 2200.00),
        "DTM TRAILER CORTO": ("HS", 21000.00),
        "DTM TRAILER EXCESO": ("HS", 1600.00),
        "TARIFA A": ("HS", 1500.00),
        "TARIFA B": ("HS", 1420.00),
        "TARIFA C": ("HS", 1400.00),
        "VARIOS": ("UNI", 75000.00),
    },
}

# (subcategory, item, unit, cost, extra filters)
SERVICES = [
    ("General", "DIESEL", "DIA", 3000, {}),
    ("General", "LODO / FLUIDOS", "DIA", 2500, {}),
    ("Direccional", "HERRAMIENTAS DIR", "DIA", 6500, {"required_for_dir": True}),
    ("Direccional", "PERSONAL DIR", "DIA", 1200, {"required_for_dir": True}),
    ("Medicion", "SINGLE SHOT / INCLINATION", "UNI", 1500,
     {"excluded_for_dir": True, "apply_to_lines": ["9", "10", "11", "12", "13"]}),
    ("Trepanos", "TREPANO 13 1/2", "MTS", 250, {"apply_to_lines": ["1"]}),
    ("Trepanos", "TREPANO 8 3/4", "MTS", 450, {"apply_to_lines": ["10"]}),
    ("Tijeras", "ALQUILER MENSUAL", "MES", 18000, {}),
    ("Control Geologico", "MUD LOGGING UNIT", "DIA", 1200, {}),
    ("Logging", "PERFILAJE STANDARD", "UNI", 45000, {"apply_to_lines": ["13"]}),
]

# (item, cost, well_type)
CASING = [
    ("9-5/8 32.3 STC H40", 95, "Convencional"),
    ("9-5/8 32.3 TXP-LW H40", 130, "NOC Premium + DwC"),
    ("9-5/8 32.3 TXP-LW H40", 130, "NOC BTC"),
    ("5-1/2 17 LTC K55", 65, None),
    ("5-1/2 17 LTC N80", 85, None),
    ("5-1/2 17 TBL N80", 110, None),
]

SCHEDULE_START = date(2026, 1, 1)
SCHEDULE_SPACING_DAYS = 15

# (id, name, type); rigs alternate H-202 / H-203
SCHEDULE_WELLS = [
    ("PC-4030", "PC-4030", "Convencional"),
    ("PCx-4034", "PCx-4034", "Convencional"),
    ("EH-5019", "EH-5019", "Convencional"),
    ("EH-5020", "EH-5020", "Convencional"),
    ("EH-5021", "EH-5021", "Convencional"),
    ("PC-4032", "PC-4032", "NOC Premium + DwC"),
    ("PCx-40342", "PCx-40342", "NOC Premium + DwC"),
    ("EH-50191", "EH-50191", "NOC Premium + DwC"),
    ("EH-50201", "EH-50201", "NOC Premium + DwC"),
    ("EH-50212", "EH-50212", "Convencional"),
    ("PC-40302", "PC-40302", "Convencional"),
    ("PCx-40342-2", "PCx-40342", "Convencional"),
    ("EH-50193", "EH-50193", "Convencional"),
    ("EH-50203", "EH-50203", "Convencional"),
    ("EH-50213", "EH-50213", "Convencional"),
    ("PC-40303", "PC-40303", "Convencional"),
    ("PCx-40343", "PCx-40343", "Convencional"),
    ("EH-50194", "EH-50194", "Convencional"),
    ("EH-50204", "EH-50204", "Convencional"),
    ("EH-50214", "EH-50214", "Convencional"),
    ("PC-40304", "PC-40304", "Convencional"),
    ("PCx-40344", "PCx-40344", "Convencional"),
    ("EH-50195", "EH-50195", "Convencional"),
    ("EH-50205", "EH-50205", "Convencional"),
    ("EH-50215", "EH-50215", "NOC BTC"),
]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def generate_program_template() -> pd.DataFrame:
    rows = []
    for line_id, phase, activity, line_type, params, section, offline in PROGRAM:
        row = {c: None for c in PROGRAM_COLUMNS}
        row.update({
            "id": line_id,
            "phase": phase,
            "activity": activity,
            "type": line_type,
            "section": section,
            "is_offline_capable": offline,
        })
        row.update(params)
        rows.append(row)
    return pd.DataFrame(rows, columns=PROGRAM_COLUMNS)


def generate_cost_catalog() -> pd.DataFrame:
    rows = []

    def add(category, subcategory, item, unit, cost, **extra):
        lines = extra.pop("apply_to_lines", None)
        rows.append({
            "category": category,
            "subcategory": subcategory,
            "item": item,
            "unit": unit,
            "cost": cost,
            "equipment_type": extra.get("equipment_type"),
            "well_type": extra.get("well_type"),
            "required_for_dir": extra.get("required_for_dir", False),
            "excluded_for_dir": extra.get("excluded_for_dir", False),
            "apply_to_lines": "|".join(lines) if lines else None,
        })

    for rig, items in RIG_RATES.items():
        for item, (unit, cost) in items.items():
            add("EQUIPO", rig, item, unit, cost, equipment_type=rig)
    for subcategory, item, unit, cost, extra in SERVICES:
        add("SERVICIOS", subcategory, item, unit, cost, **extra)
    for item, cost, well_type in CASING:
        add("MATERIALES", "Casing", item, "MTS", cost, well_type=well_type)

    return pd.DataFrame(rows, columns=CATALOG_COLUMNS)


def generate_activity_schedule() -> pd.DataFrame:
    rows = []
    for i, (well_id, name, well_type) in enumerate(SCHEDULE_WELLS):
        start = SCHEDULE_START + timedelta(days=SCHEDULE_SPACING_DAYS * i)
        rows.append({
            "id": well_id,
            "name": name,
            "type": well_type,
            "start_date": start.strftime("%Y-%m-%d"),
            "equipment": "H-202" if i % 2 == 0 else "H-203",
            "done": False,
        })
    return pd.DataFrame(rows)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    print("Generating program_template.csv ...")
    program = generate_program_template()
    program.to_csv(DATA_DIR / "program_template.csv", index=False)
    print(f"  -> {len(program)} rows")

    print("Generating cost_catalog.csv ...")
    catalog = generate_cost_catalog()
    catalog.to_csv(DATA_DIR / "cost_catalog.csv", index=False)
    print(f"  -> {len(catalog)} rows")

    print("Generating activity_schedule.csv ...")
    schedule = generate_activity_schedule()
    schedule.to_csv(DATA_DIR / "activity_schedule.csv", index=False)
    print(f"  -> {len(schedule)} rows")

    print("\nAll CSV files generated successfully!")


if __name__ == "__main__":
    main()
