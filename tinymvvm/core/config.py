from typing import Any, Literal, Optional
import json
import os
from pydantic import BaseModel, Field, ValidationError
from loguru import logger
from tinymvvm.core.events import Signal

# --- Settings Models ---
class GeneralSettings(BaseModel):
    app_name: str = "TinyMvvm App"
    debug_mode: bool = True
    log_dir: Optional[str] = "logs"

class WindowSettings(BaseModel):
    width: int = 1024
    height: int = 768
    title: Optional[str] = None

class FlyoutSettings(BaseModel):
    width: int = 320
    position: Literal["left", "right"] = "right"

class AppConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    window: WindowSettings = Field(default_factory=WindowSettings)
    flyout: FlyoutSettings = Field(default_factory=FlyoutSettings)

# --- Manager ---
class ConfigManager:
    """
    Manages application configuration with persistence and reactivity.

    With filepath=None the configuration lives in memory only.
    """
    def __init__(self, filepath: Optional[str] = "config.json"):
        self.filepath = filepath
        self._data = AppConfig()
        self.on_changed = Signal("ConfigChanged")
        self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if section not in AppConfig.model_fields:
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        try:
            validated = type(section_obj).model_validate({**section_obj.model_dump(), key: value})
        except ValidationError as e:
            raise ValueError(f"Invalid value for {section}.{key}: {value!r}") from e

        setattr(self._data, section, validated)
        self._save()
        self.on_changed.emit(section, key, getattr(validated, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if self.filepath is None:
            return
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
                self._save()
        else:
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if self.filepath is None:
            return
        path = self.filepath
        if path.endswith('.toml'):
            # No TOML writer in the stdlib; keep a JSON sibling instead
            path = os.path.splitext(path)[0] + ".json"
        try:
            dirname = os.path.dirname(path)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except OSError as e:
            logger.error(f"Failed to save config to {path}: {e}")
