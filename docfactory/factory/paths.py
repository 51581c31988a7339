"""
Dotted-path access to nested dicts
"""
from typing import Any, Dict


def set_path(document: Dict[str, Any], path: str, value: Any):
    """Write ``value`` at ``path``, creating intermediate dicts"""
    parts = path.split('.')
    current = document
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


def has_path(document: Dict[str, Any], path: str) -> bool:
    current: Any = document
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return False
        current = current[part]
    return True


def get_path(document: Dict[str, Any], path: str, default: Any = None) -> Any:
    current: Any = document
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current
