"""
Nested mapping helpers
"""

import copy
from typing import Any, Mapping


def merge_deep(*layers: Mapping[str, Any]) -> dict:
    """
    Deep-merge mappings into a new dict; later layers win.

    Nested mappings are merged recursively and lists are concatenated. Any
    other conflicting value is replaced by the later layer. None of the
    inputs are modified and the result shares no containers with them.
    """
    result: dict = {}
    for layer in layers:
        for key, value in layer.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, Mapping):
                result[key] = merge_deep(result[key], value)
            elif key in result and isinstance(result[key], list) and isinstance(value, list):
                result[key] = result[key] + copy.deepcopy(value)
            elif isinstance(value, Mapping):
                result[key] = merge_deep(value)
            else:
                result[key] = copy.deepcopy(value)
    return result
