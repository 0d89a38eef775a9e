"""Settings management for Hologram scans."""

import logging
import os
from typing import Any, Dict, Optional

import orjson

logger = logging.getLogger(__name__)

PAIRING_POLICIES = ("last", "nearest", "skip")


class Settings:
    """Scan settings: built-in defaults, then the settings file, then overrides.

    Usage:
        settings = Settings()                      # defaults + settings.json
        settings = Settings(batch_size=10)         # with an override
        settings = Settings(config_path=None)      # defaults only, no file
    """

    DEFAULT_SETTINGS: Dict[str, Any] = {
        "batch_size": 50,
        "max_workers": None,
        "thumbnail_size": 200,
        "thumbnail_quality": 80,
        "generate_thumbnails": True,
        "pairing_policy": "last",
        "use_exiftool": False,
        "log_dir": None,
    }

    _DEFAULT_PATH = object()

    def __init__(self, config_path: Any = _DEFAULT_PATH, **overrides: Any):
        """Initialize settings.

        Args:
            config_path: Settings file to read. Defaults to the per-user
                config location; pass None to skip reading any file.
            **overrides: Values that take precedence over the file.

        Raises:
            KeyError: If an override names an unknown setting.
        """
        self._settings: Dict[str, Any] = self.DEFAULT_SETTINGS.copy()
        if config_path is self._DEFAULT_PATH:
            config_path = self.default_config_path()
        self._config_path: Optional[str] = config_path
        if self._config_path:
            self.load()
        for key, value in overrides.items():
            if key not in self.DEFAULT_SETTINGS:
                raise KeyError(f"Unknown setting: {key}")
            if value is not None:
                self._settings[key] = value

    @staticmethod
    def default_config_path() -> str:
        """Get path to the per-user settings file."""
        if os.name == "nt":  # Windows
            base = os.environ.get("APPDATA", os.path.expanduser("~"))
        else:  # macOS/Linux
            base = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
        return os.path.join(base, "hologram", "settings.json")

    @property
    def config_path(self) -> Optional[str]:
        return self._config_path

    def load(self) -> None:
        """Load settings from file, keeping defaults for anything missing.

        A missing or corrupt file leaves the current values untouched.
        """
        if not self._config_path or not os.path.exists(self._config_path):
            return
        try:
            with open(self._config_path, "rb") as f:
                loaded = orjson.loads(f.read())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning(f"Error loading settings from {self._config_path}: {e}")
            return

        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring settings file {self._config_path}: not a JSON object")
            return

        for key, value in loaded.items():
            if key in self.DEFAULT_SETTINGS:
                self._settings[key] = value
            else:
                logger.debug(f"Ignoring unknown setting {key!r} in {self._config_path}")

    def save(self) -> None:
        """Save settings to file."""
        if not self._config_path:
            return
        try:
            os.makedirs(os.path.dirname(self._config_path), exist_ok=True)
            with open(self._config_path, "wb") as f:
                f.write(orjson.dumps(self._settings, option=orjson.OPT_INDENT_2))
        except OSError as e:
            logger.warning(f"Error saving settings to {self._config_path}: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value."""
        return self._settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a setting value."""
        self._settings[key] = value

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._settings)

    def validate(self) -> None:
        """Check that values are usable for a scan.

        Raises:
            ValueError: On a non-positive size/worker count or unknown policy.
        """
        for key in ("batch_size", "thumbnail_size"):
            value = self._settings[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{key} must be a positive integer, got {value!r}")

        workers = self._settings["max_workers"]
        if workers is not None and (not isinstance(workers, int) or workers < 1):
            raise ValueError(f"max_workers must be a positive integer, got {workers!r}")

        quality = self._settings["thumbnail_quality"]
        if not isinstance(quality, int) or not 1 <= quality <= 95:
            raise ValueError(f"thumbnail_quality must be between 1 and 95, got {quality!r}")

        if self._settings["pairing_policy"] not in PAIRING_POLICIES:
            raise ValueError(
                f"pairing_policy must be one of {', '.join(PAIRING_POLICIES)}, "
                f"got {self._settings['pairing_policy']!r}"
            )

    # Typed accessors used by the scan pipeline

    @property
    def batch_size(self) -> int:
        return self._settings["batch_size"]

    @property
    def max_workers(self) -> Optional[int]:
        return self._settings["max_workers"]

    @property
    def thumbnail_size(self) -> int:
        return self._settings["thumbnail_size"]

    @property
    def thumbnail_quality(self) -> int:
        return self._settings["thumbnail_quality"]

    @property
    def generate_thumbnails(self) -> bool:
        return bool(self._settings["generate_thumbnails"])

    @property
    def pairing_policy(self) -> str:
        return self._settings["pairing_policy"]

    @property
    def use_exiftool(self) -> bool:
        return bool(self._settings["use_exiftool"])

    @property
    def log_dir(self) -> Optional[str]:
        return self._settings["log_dir"]
