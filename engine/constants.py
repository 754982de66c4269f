"""Business constants for the drilling program engine."""

from engine.types import SimulationParams

# Directional wells are modeled as uniformly slower on every rate-based line.
DIRECTIONAL_ROP_PENALTY = 0.85

# Effective rates never drop below this after an ABSOLUTE_VALUE adjustment.
MIN_EFFECTIVE_RATE = 0.1

# ---------------------------------------------------------------------------
# Rig hourly rate classes (by template line id)
# ---------------------------------------------------------------------------

ITEMS_RATE_A = ("1", "2", "9", "10", "11", "12")
ITEMS_RATE_B = ("3", "4", "5", "6", "7", "8", "13", "14", "15", "16", "17")

RATE_A_ITEM = "TARIFA A"
RATE_B_ITEM = "TARIFA B"

# ---------------------------------------------------------------------------
# Mobilization / DTM
# ---------------------------------------------------------------------------

MOBILIZATION_LINE_ID = "0"
DTM_EXCESS_THRESHOLD_KM = 20

MOBILIZATION_ITEM = "MOVILIZACION"
DTM_SHORT_ITEM = "DTM CORTO"
DTM_TRAILER_SHORT_ITEM = "DTM TRAILER CORTO"
DTM_EXCESS_ITEM = "DTM EXCESO > 20KM"
DTM_TRAILER_EXCESS_ITEM = "DTM TRAILER EXCESO"

# ---------------------------------------------------------------------------
# Services / materials
# ---------------------------------------------------------------------------

GEOLOGICAL_CONTROL_SUBCATEGORY = "Control Geologico"
DAYS_PER_MONTH = 30

# Line dropped together with LOGGING lines when the well is not logged.
NO_LOGGING_EXTRA_LINE_ID = "11"

GUIDE_CASING_LINE_ID = "4"
ISOLATION_CASING_LINE_ID = "14"
CASING_SUBCATEGORY = "Casing"
GUIDE_CASING_SIZE = "9-5/8"
CONVENTIONAL_WELL_TYPE = "Convencional"
K55_GRADE = "K55"
N80_LTC_GRADE = "LTC N80"
N80_TBL_GRADE = "TBL N80"
K55_MAX_DEPTH = 2400  # m; deeper conventional strings get an N80 top section
N80_SPLIT_LENGTH = 400  # m of N80-LTC at the top of a split string

# ---------------------------------------------------------------------------
# Defaults for a well that has not been configured yet
# ---------------------------------------------------------------------------

DEFAULT_PARAMS = SimulationParams()
