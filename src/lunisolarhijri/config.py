"""Environment-driven settings. Entry points call load_dotenv() before load_settings()."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

_ROOT = Path(__file__).parent.parent.parent

DEFAULT_PHASE_TABLE = "resources/moon-phases-601-to-4000-with-eclipses-UT.csv"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime configuration."""

    phase_table: str  # Local path or http(s) URL
    data_dir: Path  # skyfield Loader directory
    ephemeris: str  # skyfield ephemeris file name
    lang: str  # "en" or "ar"
    http_timeout: float  # Seconds


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def _resolve(location: str) -> str:
    if is_url(location):
        return location
    path = Path(location)
    return str(path if path.is_absolute() else _ROOT / path)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (used by tests).

    Returns:
        Settings with relative paths resolved against the project root.
    """
    env = os.environ if environ is None else environ
    return Settings(
        phase_table=_resolve(env.get("LUNISOLAR_PHASE_TABLE", DEFAULT_PHASE_TABLE)),
        data_dir=Path(_resolve(env.get("LUNISOLAR_DATA_DIR", "resources"))),
        ephemeris=env.get("LUNISOLAR_EPHEMERIS", "de421.bsp"),
        lang=env.get("LUNISOLAR_LANG", "en"),
        http_timeout=float(env.get("LUNISOLAR_HTTP_TIMEOUT", "10")),
    )
