"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Key used for day-level records (Weekoff) that do not belong to a shift.
NO_SHIFT_ID = 0

UNKNOWN_LOCATION = "Unknown Location"
ABSENT_LOCATION = "N/A"

EMPLOYEE_ID_PREFIX = "Ats"
EMPLOYEE_ID_COUNTER = "employeeId"

EMPLOYER_PF_RATE = Decimal("0.125")
EMPLOYEE_PF_RATE = Decimal("0.12")
EMPLOYER_ESIC_RATE = Decimal("0.0325")
EMPLOYEE_ESIC_RATE = Decimal("0.0075")

DEFAULT_FACE_MATCH_THRESHOLD = 0.3
DEFAULT_FACE_MODEL = "Facenet512"
DEFAULT_FACE_CACHE_TTL_SECONDS = 3600
DEFAULT_GEOCODER_TIMEOUT_SECONDS = 5
DEFAULT_GEOCODER_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_GEOCODER_USER_AGENT = "attendance-payroll/1.0"

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
