from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import json
import logging
from pathlib import Path

log = logging.getLogger(__name__)


def _repo_root() -> Path:
    here = Path(__file__).resolve()
    return here.parents[3]


def default_settings_path() -> Path:
    return _repo_root() / "implementation" / "settings.json"


def default_save_path() -> Path:
    return _repo_root() / "implementation" / "save.json"


@dataclass
class Settings:
    ticks_per_second: float = 10.0
    autosave_seconds: float = 30.0
    save_path: str = str(default_save_path())
    log_level: str = "INFO"
    base_fishing_duration_ms: float = 1000.0
    debug_console: bool = False

    @property
    def save_file(self) -> Path:
        return Path(self.save_path)


def load_settings(path: Path | None = None) -> Settings:
    """Read settings JSON; anything missing or malformed keeps its default."""
    if path is None:
        path = default_settings_path()
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        log.warning("Could not read settings %s: %s", path, e)
        return Settings()
    if not isinstance(data, dict):
        return Settings()

    settings = Settings()
    for f in fields(Settings):
        if f.name not in data:
            continue
        default = getattr(settings, f.name)
        value = data[f.name]
        if isinstance(default, bool):
            ok = isinstance(value, bool)
        elif isinstance(default, float):
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
            value = float(value) if ok else value
        else:
            ok = isinstance(value, type(default))
        if ok:
            setattr(settings, f.name, value)
        else:
            log.warning("Ignoring setting %s=%r (expected %s)", f.name, value, type(default).__name__)
    for key in data:
        if key not in {f.name for f in fields(Settings)}:
            log.warning("Unknown setting %r ignored", key)
    return settings


def save_settings(settings: Settings, path: Path | None = None) -> None:
    if path is None:
        path = default_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
