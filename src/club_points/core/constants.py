"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

# Column headers shared by the CSV import and the exports.
COL_NAME = "Nom complet"
COL_CNI = "CNI"
COL_CNE = "CNE"
COL_SCHOOL_LEVEL = "Niveau scolaire"
COL_WHATSAPP = "Numéro WhatsApp"
COL_STATUS = "Status"
COL_POINTS = "Points"
COL_ACTIVITY = "Activity"

PARTICIPANT_EXPORT_HEADER = (
    COL_NAME,
    COL_CNI,
    COL_CNE,
    COL_SCHOOL_LEVEL,
    COL_WHATSAPP,
    COL_STATUS,
    COL_POINTS,
)

PARTICIPATION_REPORT_HEADER = (
    COL_NAME,
    COL_CNI,
    COL_SCHOOL_LEVEL,
    COL_WHATSAPP,
    COL_ACTIVITY,
    COL_POINTS,
)

DEFAULT_DATA_FILE = "data/club_points.json"
DEFAULT_LOG_LEVEL = "INFO"

# Points are stored in a signed 32-bit INT column.
MIN_POINTS = -(2**31)
MAX_POINTS = 2**31 - 1
