"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

# Volunteers must be on site this many minutes before their shift starts.
MANDATORY_ARRIVAL_MINUTES = 30
# Check-in opens this many minutes before the arrival deadline.
EARLY_CHECKIN_WINDOW_MINUTES = 120

GENERAL_ROLE = "Umum"

HISTORY_REDIRECT_DELAY_SECONDS = 1.0
DEFAULT_AI_TIMEOUT_SECONDS = 20.0
SNAPSHOT_JPEG_QUALITY = 80

# Local storage keys, shared with the kiosk web page.
RECORDS_KEY = "attendance_records"
VOLUNTEERS_KEY = "volunteers"
RULES_ACCEPTED_KEY = "rules_accepted"

SITE_NAME = "Dapur Kalibata 2"
