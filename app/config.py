import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# Use SQLite by default; override with DATABASE_URL env (postgresql+asyncpg://...)
# Path with forward slashes so SQLite URL works on Windows
_db_path = (BASE_DIR / "data" / "app.db").resolve()
_default_url = f"sqlite+aiosqlite:///{_db_path.as_posix()}"
DATABASE_URL = os.getenv("DATABASE_URL", _default_url)

# Sync URL for scripts
SYNC_DATABASE_URL = DATABASE_URL.replace("+aiosqlite", "").replace("+asyncpg", "")

DATA_DIR = BASE_DIR / "data"

# Единственная пара логин/пароль для Basic-Auth
AUTH_USERNAME = os.getenv("AUTH_USERNAME", "xmusr")
AUTH_PASSWORD = os.getenv("AUTH_PASSWORD", "xmpass")

# Страна, из которой разрешены защищённые запросы (гео-проверка)
ALLOWED_COUNTRY = os.getenv("ALLOWED_COUNTRY", "Cyprus")

# Набор проверок для POST/DELETE: "1" — гео, "2" — Basic-Auth, "1,2" — обе
AUTH_OPTIONS = os.getenv("AUTH_OPTIONS", "2")
# true: первая опция в списке — внешняя (проверяется первой)
AUTH_OUTERMOST_FIRST = os.getenv("AUTH_OUTERMOST_FIRST", "false").lower() in ("true", "1", "yes")

GEOLOCATION_URL = os.getenv("GEOLOCATION_URL", "https://ipapi.co/{ip}/country_name")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
