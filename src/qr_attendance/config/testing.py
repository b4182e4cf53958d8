SECRET_KEY = "test-secret"

# None keeps everything in memory
STORE_PATH = None

CODE_PREFIX = "ATTENDANCE_QR"
CODE_WINDOW_MS = 15000

ADMIN_USERNAME = "admin@aimscs"
ADMIN_PASSWORD = "admin123"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_SEED_DEMO = False
DEMO_STUDENT_PASSWORD = "student123"

HISTORY_LIMIT = 30
