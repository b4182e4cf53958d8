"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_CODE_PREFIX = "ATTENDANCE_QR"
SESSION_CODE_DELIMITER = "_"
DEFAULT_CODE_WINDOW_MS = 15_000

SIMULATED_DETECTION_RATE = 0.01
SIMULATED_FRAME_INTERVAL_SECONDS = 0.1

MIN_PASSWORD_LENGTH = 6
DEFAULT_HISTORY_LIMIT = 30
RECENT_FACULTY_DAYS = 30

# Storage keys, shared with the demo data written by the browser version.
STUDENTS_KEY = "students"
FACULTY_KEY = "faculty"
ATTENDANCE_KEY = "attendanceRecords"
