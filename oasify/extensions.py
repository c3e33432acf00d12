"""
Specification extensions ("x-" fields) attached to model nodes.
"""

from typing import Any, Dict, Mapping

from oasify.common import copy_value

EXTENSION_PREFIX = 'x-'


def extension_name(pattern: str) -> str:
    """ Returns the pattern as an extension field name, adding the x- prefix if missing. """
    if pattern.startswith(EXTENSION_PREFIX):
        return pattern
    return f"{EXTENSION_PREFIX}{pattern}"


def get_extensions(extensions: Any) -> Dict[str, Any]:
    """
    Maps model scope extensions to OpenAPI extension fields.

    Args:
        extensions: None, a mapping of pattern -> value, or a list of
            ``{'extensionPattern': ..., 'extensionValue': ...}`` entries.

    Returns:
        A new dict of ``x-...`` fields. Entries without a pattern are skipped.
    """
    if not extensions:
        return {}
    if isinstance(extensions, Mapping):
        return {extension_name(str(pattern)): copy_value(value) for pattern, value in extensions.items() if pattern}
    if not isinstance(extensions, (list, tuple)):
        return {}

    result: Dict[str, Any] = {}
    for entry in extensions:
        if not isinstance(entry, Mapping):
            continue
        pattern = entry.get('extensionPattern')
        if not pattern:
            continue
        result[extension_name(str(pattern))] = copy_value(entry.get('extensionValue'))
    return result
