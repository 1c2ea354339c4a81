# Settings from environment variables (.env locally, platform variables in prod).

import os
from dotenv import load_dotenv

load_dotenv()


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _env_bool(key: str, default: str = "true") -> bool:
    return _env(key, default).lower() in ("1", "true", "yes")


def _env_list(key: str, default: list = None) -> list:
    s = _env(key)
    if not s:
        return default or []
    return [x.strip() for x in s.split(",") if x.strip()] or (default or [])


# ============================================================================
# Database
# ============================================================================
DATABASE_URL = _env("DATABASE_URL")
DATABASE_URL_FALLBACK = _env("DATABASE_URL_FALLBACK", "sqlite+aiosqlite:///./grantmatch.db")

# Insert the demo grants on startup when the grants table is empty
SEED_GRANTS = _env_bool("SEED_GRANTS", "true")

# ============================================================================
# HTTP
# ============================================================================
LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = _env_list("CORS_ORIGINS", ["*"])

# Client -> API
BACKEND_URL = _env("BACKEND_URL", "http://localhost:8000")

# ============================================================================
# BDNS ingestion (Base de Datos Nacional de Subvenciones)
# ============================================================================
BDNS_URL = _env(
    "BDNS_URL", "https://www.infosubvenciones.es/bdnstrans/GE/es/convocatorias"
)
BDNS_TIMEOUT = int(_env("BDNS_TIMEOUT", "30"))
