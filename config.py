# config.py
import os
from dotenv import load_dotenv

load_dotenv()

PORT = int(os.getenv("PORT", "3000"))

DATABASE_URL = os.getenv("DATABASE_URL") or "sqlite:///./uniform.db"

# static teacher account, never stored in the users table
TEACHER_ID = os.getenv("TEACHER_ID", "teacher123")
TEACHER_PASSWORD = os.getenv("TEACHER_PASSWORD", "teacher@999")

SESSION_SECRET = os.getenv("SESSION_SECRET", "uniform-secret")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(7 * 24 * 3600)))

MODEL_PATH = os.getenv("MODEL_PATH", "weights/uniform-cls.pt")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
UPLOAD_MAX_AGE_SECONDS = int(os.getenv("UPLOAD_MAX_AGE_SECONDS", "3600"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
