# services/config_bridge.py
from __future__ import annotations

from typing import Any, Optional, Tuple

from flask import current_app, has_app_context

from services.config_service import ConfigManager

_CM = ConfigManager()


def _split(keys: Tuple[str, ...], section: str) -> Tuple[str, ...]:
    if len(keys) == 1 and "." in keys[0]:
        keys = tuple(keys[0].split("."))
    return keys[1:] if keys and keys[0] == section else keys


def _walk(node: Any, keys: Tuple[str, ...]) -> Optional[Any]:
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def _app_section(section: str) -> Optional[dict]:
    return current_app.config.get(section) if has_app_context() else None


def get_cfg(*keys: str, section: str = "schedule", default=None, manager: ConfigManager | None = None):
    """
    Look up a value in one section of config.json, falling back to Flask's app.config.

        get_cfg()                  -> the whole section
        get_cfg("retries")         -> section["retries"]
        get_cfg("schedule.ranges") -> dotted path; a leading section name is dropped

    Raises RuntimeError when the section is missing because config.json did not parse.
    """
    cm = manager or _CM
    keys = _split(keys, section)

    root = cm.get(section)
    if root is None:
        root = _app_section(section)
    if root is None:
        err = cm.last_load_error
        if err is not None:
            raise RuntimeError(
                f"Config JSON is invalid: {cm.resolved_path} "
                f"(line {err.lineno}, column {err.colno}): {err.msg}"
            )
        return default

    value = _walk(root, keys)
    if value is None and keys:
        value = _walk(_app_section(section), keys)
    return default if value is None else value


def where_cfg(section: str = "schedule") -> str:
    """One-line description of the config source, for debug logs."""
    return (
        f"config file={_CM.resolved_path!r} "
        f"section {section!r} present={_CM.get(section) is not None} "
        f"parse error={_CM.last_load_error}"
    )
