import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORE_PATH = os.getenv("STORE_PATH", "instance/attendance.json")

CODE_PREFIX = os.getenv("CODE_PREFIX", "ATTENDANCE_QR")
CODE_WINDOW_MS = int(os.getenv("CODE_WINDOW_MS", "15000"))

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin@aimscs")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "please-set-ADMIN_PASSWORD")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_SEED_DEMO = bool(int(os.getenv("AUTO_SEED_DEMO", "0")))
DEMO_STUDENT_PASSWORD = os.getenv("DEMO_STUDENT_PASSWORD", "student123")

HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "30"))
