"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    LOG_LEVEL                  — Root logging level name (default: INFO)
    LOG_DIR                    — Directory for daily log files (default: logs)
    XML_ENCODING               — Encoding used when writing new documents (default: utf-8)
    XML_ATOMIC_WRITES          — Persist patched files via temp file + rename (default: true)
    XML_RESOLVE_ENTITIES       — Let the parser expand external entities (default: false)
    ENABLE_XML_WRITE_ENDPOINT  — Enable POST /xml/poke (default: false)
    API_HOST / API_PORT        — Bind address for the HTTP surface

Atomic Writes:
    XML_ATOMIC_WRITES controls how xml_poke persists a patched document.
    When enabled the document is serialized next to the target and moved
    over it with os.replace, so a crash never leaves a half-written file.
    Disable only on file systems where rename across handles is not allowed.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")

# XML persistence
XML_ENCODING = os.getenv("XML_ENCODING", "utf-8")
XML_ATOMIC_WRITES = _env_flag("XML_ATOMIC_WRITES", "true")

# Parser hardening: never fetch DTDs or expand external entities unless asked
XML_RESOLVE_ENTITIES = _env_flag("XML_RESOLVE_ENTITIES", "false")

# HTTP surface
ENABLE_XML_WRITE_ENDPOINT = _env_flag("ENABLE_XML_WRITE_ENDPOINT", "false")
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", 8000))
