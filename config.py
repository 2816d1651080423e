"""
Configuration settings for the multipart form encoder.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base directory
BASE_DIR = Path(__file__).parent

# Values from a local .env file; real environment variables take precedence
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Endpoint receiving the form; when empty the body is written to OUTPUT_FILE
FORM_ENDPOINT_URL = os.getenv("FORM_ENDPOINT_URL", "")

# JSON document whose top-level object becomes the form fields
PAYLOAD_FILE = Path(os.getenv("PAYLOAD_FILE", str(BASE_DIR / "payload.json")))

# Files to attach, comma-separated "field=path" pairs
ATTACHMENTS = os.getenv("ATTACHMENTS", "")

# Output file used when no endpoint is configured
OUTPUT_FILE = Path(os.getenv("OUTPUT_FILE", str(BASE_DIR / "data" / "form.multipart")))

# Rate limiting
REQUESTS_PER_SECOND = int(os.getenv("REQUESTS_PER_SECOND", "2"))
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "5"))
CONNECT_TIMEOUT = float(os.getenv("CONNECT_TIMEOUT", "10"))  # seconds for connection establishment
READ_TIMEOUT = float(os.getenv("READ_TIMEOUT", "60"))  # seconds for reading response

# Encoding
COPY_CHUNK_SIZE = int(os.getenv("COPY_CHUNK_SIZE", str(64 * 1024)))
# Collections of objects are sent as one JSON field instead of one field per element
COLLAPSE_STRUCTURED_ARRAYS = _env_bool("COLLAPSE_STRUCTURED_ARRAYS", True)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "encoder.log")
SHOW_PROGRESS = _env_bool("SHOW_PROGRESS", True)
