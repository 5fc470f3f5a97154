# config.py
import os

from dotenv import load_dotenv

# ── Setup ──────────────────────────────────────────────────────────────────────
load_dotenv()

# Transport
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3000"))
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT_SEC", "20"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma-separated list of allowed origins; empty means allow all
RAW_ALLOWED_ORIGINS = os.getenv("ALLOWED_CORS_ORIGINS", "")
ALLOWED_CORS_ORIGINS = [o.strip() for o in RAW_ALLOWED_ORIGINS.split(",") if o.strip()] or ["*"]

# Remote query shape
SEARCH_PAGE_SIZE = int(os.getenv("SEARCH_PAGE_SIZE", "100"))
RESULT_RECORD_COUNT = int(os.getenv("RESULT_RECORD_COUNT", "10"))
EXPORT_SIZE = os.getenv("EXPORT_SIZE", "1024,768")
EXPORT_FORMAT = os.getenv("EXPORT_FORMAT", "png32")

# Half-width of the square search envelope, in degrees (~1km at the equator only)
NEAREST_BUFFER_DEGREES = float(os.getenv("NEAREST_BUFFER_DEGREES", "0.01"))

# Attribute holding the display name in tradeoff results
DISTRICT_NAME_FIELD = os.getenv("DISTRICT_NAME_FIELD", "D_NAME_EN")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
