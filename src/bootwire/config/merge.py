"""Deep merge of configuration mappings."""

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Dict


def deep_merge(base: Mapping, override: Mapping) -> Dict[str, Any]:
    """
    Deep merge two mappings, with override taking precedence.

    Merge rules:
    - Mappings are merged recursively
    - Lists are replaced (not concatenated)
    - All other values replace

    Neither argument is modified.

    Args:
        base: Base configuration mapping
        override: Mapping to merge in (takes precedence)

    Returns:
        Merged configuration dictionary
    """
    result = {key: deepcopy(value) for key, value in base.items()}

    for key, value in override.items():
        if (key in result and
                isinstance(result[key], Mapping) and
                isinstance(value, Mapping)):
            result[key] = deep_merge(result[key], value)
        elif isinstance(value, Mapping):
            result[key] = deep_merge({}, value)
        else:
            result[key] = deepcopy(value)

    return result
