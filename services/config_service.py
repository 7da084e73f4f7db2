import json
import logging
import os

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class ConfigManager:
    """
    Read-only view of config.json.

    Relative paths are anchored to the project root so the CLI and the Flask app
    see the same file regardless of the working directory. A file that fails to
    parse loads as an empty config; the decode error is kept on
    ``last_load_error`` so callers can report where the file is broken.
    """

    def __init__(self, config_path="config.json"):
        self._resolved_path = config_path if os.path.isabs(config_path) else os.path.join(PROJECT_ROOT, config_path)
        self._last_load_error = None
        self.config = self._read()

    @property
    def last_load_error(self):
        return self._last_load_error

    @property
    def resolved_path(self):
        return self._resolved_path

    def _read(self):
        path = self._resolved_path
        if not os.path.exists(path):
            logger.warning(f"No configuration file at {path}. Using built-in defaults.")
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._last_load_error = e
            logger.error(f"Invalid JSON in {path} (line {e.lineno}, column {e.colno}). Loading empty configuration.")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Top level of {path} must be an object. Loading empty configuration.")
            return {}
        return data

    def get(self, *keys, default=None):
        """get("schedule", "retries") or get("schedule.retries")."""
        if len(keys) == 1 and isinstance(keys[0], str):
            keys = tuple(keys[0].split("."))

        node = self.config
        for key in keys:
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node
