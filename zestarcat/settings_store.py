from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from zestarcat.angles import Angle
from zestarcat.loader import DEFAULT_MAGNITUDE, CatalogSource
from zestarcat.sky import SkyGrid

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path.home() / ".zestarcat_settings.json"
# Increment when the on-disk settings layout or recommended defaults change
SETTINGS_SCHEMA_VERSION = 1

DEFAULT_README = "cat/xhip.readme"
DEFAULT_DATA = "cat/xhip.dat.bz2"
DEFAULT_RESOLUTION_ARCMIN = 20.0


@dataclass
class PersistentSettings:
    schema_version: int = SETTINGS_SCHEMA_VERSION
    readme_path: str = DEFAULT_README
    data_path: str = DEFAULT_DATA
    block_index: int = 0
    ra_column: str = "RAdeg"
    dec_column: str = "DEdeg"
    mag_column: Optional[str] = "Vmag"
    default_magnitude: int = DEFAULT_MAGNITUDE
    resolution_arcmin: float = DEFAULT_RESOLUTION_ARCMIN
    atomic_load: bool = True
    log_level: str = "INFO"

    def catalog_source(self) -> CatalogSource:
        return CatalogSource(
            readme=Path(self.readme_path).expanduser(),
            data=Path(self.data_path).expanduser(),
            block_index=self.block_index,
            ra_column=self.ra_column,
            dec_column=self.dec_column,
            mag_column=self.mag_column or None,
            default_magnitude=self.default_magnitude,
        )

    def sky_grid(self) -> SkyGrid:
        return SkyGrid.for_resolution(Angle.from_arcminutes(str(self.resolution_arcmin)))


def _resolve_settings_path() -> Path:
    """Return the active settings path, honoring runtime overrides."""
    pkg = sys.modules.get("zestarcat")
    if pkg is not None:
        override = getattr(pkg, "SETTINGS_PATH", None)
        if override:
            return Path(override).expanduser()
    return SETTINGS_PATH


def load_persistent_settings() -> PersistentSettings:
    path = _resolve_settings_path()
    if not path.exists():
        return PersistentSettings()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable settings %s: %s", path, exc)
        return PersistentSettings()
    if not isinstance(payload, dict):
        return PersistentSettings()

    defaults = PersistentSettings()
    try:
        settings = PersistentSettings(
            schema_version=int(payload.get("schema_version", 1)),
            readme_path=str(payload.get("readme_path") or defaults.readme_path),
            data_path=str(payload.get("data_path") or defaults.data_path),
            block_index=int(payload.get("block_index", 0)),
            ra_column=str(payload.get("ra_column") or defaults.ra_column),
            dec_column=str(payload.get("dec_column") or defaults.dec_column),
            mag_column=(payload.get("mag_column") or None),
            default_magnitude=int(payload.get("default_magnitude", DEFAULT_MAGNITUDE)),
            resolution_arcmin=float(payload.get("resolution_arcmin", DEFAULT_RESOLUTION_ARCMIN)),
            atomic_load=bool(payload.get("atomic_load", True)),
            log_level=str(payload.get("log_level", "INFO") or "INFO").upper(),
        )
    except (TypeError, ValueError) as exc:
        logger.warning("ignoring invalid settings %s: %s", path, exc)
        return PersistentSettings()
    if settings.resolution_arcmin <= 0:
        settings.resolution_arcmin = DEFAULT_RESOLUTION_ARCMIN
    if settings.schema_version < SETTINGS_SCHEMA_VERSION:
        settings.schema_version = SETTINGS_SCHEMA_VERSION
    return settings


def save_persistent_settings(settings: PersistentSettings) -> None:
    path = _resolve_settings_path()
    data = asdict(settings)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


__all__ = [
    "DEFAULT_RESOLUTION_ARCMIN",
    "PersistentSettings",
    "SETTINGS_PATH",
    "SETTINGS_SCHEMA_VERSION",
    "load_persistent_settings",
    "save_persistent_settings",
]
