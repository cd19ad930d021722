import os
import tomllib
from pathlib import Path

DEFAULT_SETTINGS_FILE = Path('.treediff.toml')

# Settings key constants
SETTING_REPORT_PATH = 'report.path'
SETTING_RECORDS_PATH = 'report.records'
SETTING_OPEN_REPORT = 'report.open'
SETTING_CHECKSUM_ALGORITHM = 'checksum.algorithm'
SETTING_LOGGING_PATH = 'logging.path'
SETTING_LOGGING_LEVEL = 'logging.level'


class DiffSettings:
    """Settings manager for treediff configuration.

    Provides a read-only key-value interface to settings loaded from a TOML file.
    This class is agnostic to the schema of the settings - it simply loads the file
    and provides access to the raw data structure. Consumers interpret the values.

    Example:
        settings = DiffSettings.load()
        output = settings.get(SETTING_REPORT_PATH, 'results.txt')
        algorithm = settings.get('checksum.algorithm', 'sha256')
    """

    def __init__(self, data: dict | None = None):
        self._settings = data if data is not None else {}

    @classmethod
    def load(cls, path: str | os.PathLike | None = None) -> 'DiffSettings':
        """Load settings from a TOML file.

        Args:
            path: Settings file to load. If None, .treediff.toml in the working directory
                  is used when it exists, and empty settings otherwise.

        Raises:
            FileNotFoundError: An explicitly given settings file does not exist
            tomllib.TOMLDecodeError: The settings file is not valid TOML
        """
        if path is None:
            if not DEFAULT_SETTINGS_FILE.is_file():
                return cls()
            path = DEFAULT_SETTINGS_FILE

        with open(path, 'rb') as f:
            return cls(tomllib.load(f))

    def get(self, key: str, default=None):
        """Get a setting value by key with optional default.

        Supports both simple keys and dot notation for nested keys (e.g. 'report.path'
        accesses settings['report']['path']). Returns the default value if the key path
        does not exist or if any intermediate value is not a dictionary.

        Examples:
            >>> DiffSettings({'report': {'path': 'out.txt'}}).get(SETTING_REPORT_PATH)
            'out.txt'
            >>> DiffSettings().get('nonexistent.key', 'fallback')
            'fallback'
        """
        keys = key.split('.')
        value = self._settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value
