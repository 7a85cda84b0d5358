import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

SECRET_KEY = os.environ.get("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))  # 7 days

DB_NAME = os.environ.get("DB_NAME", "db.sqlite3")
UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "http://localhost:21541")

CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

# The one account allowed to manage admins and reset other users' passwords
OWNER_USERNAME = os.environ.get("OWNER_USERNAME", "kowse")

AUTH_CHECK_TIMEOUT_SECONDS = float(os.environ.get("AUTH_CHECK_TIMEOUT_SECONDS", 5))

# Authenticates instance-wide operator actions such as revoking every session
SERVICE_ROLE_KEY = os.environ.get("SERVICE_ROLE_KEY", "")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
