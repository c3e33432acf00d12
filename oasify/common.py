"""
Common helpers shared by the oasify converters.
"""

# pylint: disable=line-too-long

import copy
import json
import logging
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class _Omit:
    """ Marker for a key that must not appear in the emitted schema. """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'OMIT'

    def __bool__(self) -> bool:
        return False


OMIT = _Omit()

CHOICE_KEYWORDS = ('allOf', 'anyOf', 'oneOf', 'not')


def copy_value(value: Any) -> Any:
    """ Returns a deep copy of a literal value; literals too deep to copy are returned as they are. """
    try:
        return copy.deepcopy(value)
    except RecursionError:
        logger.debug("Value nested too deeply to copy, passing it through")
        return value


def pick(data: Mapping[str, Any], key: str) -> Any:
    """ Returns a copy of data[key], or OMIT if the key is not present. """
    if key in data:
        return copy_value(data[key])
    return OMIT


def truthy_or_omit(value: Any) -> Any:
    """ Returns the value if it is truthy, otherwise OMIT. """
    return value if value else OMIT


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Returns a new dict without the keys whose value is OMIT.

    Explicit None values are kept; only absence is dropped.
    """
    return {k: v for k, v in data.items() if v is not OMIT}


def first_key(mapping: Mapping[str, Any]) -> Optional[str]:
    """ Returns the first key of a mapping in insertion order, or None when it is empty. """
    for key in mapping:
        return key
    return None


def is_set(value: Any) -> bool:
    """
    Truthiness as the model tool sees it: None, False, 0 and '' are unset,
    containers count as set even when empty.
    """
    if isinstance(value, (list, tuple, dict)):
        return True
    return bool(value)


def has_ref(data: Any) -> bool:
    """ True if the node carries a non-empty $ref. """
    if not isinstance(data, Mapping):
        return False
    return bool(data.get('$ref'))


def has_choice(data: Any) -> bool:
    """ True if any of allOf, anyOf, oneOf or not is set on the node. """
    if not isinstance(data, Mapping):
        return False
    return any(is_set(data.get(choice)) for choice in CHOICE_KEYWORDS)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Not a JSON value: {name}")


def parse_example(data: Any) -> Any:
    """
    Parses a sample string as JSON.

    Args:
        data: The sample value, usually a JSON string.

    Returns:
        The parsed value, or the original value if it does not parse. OMIT stays OMIT.
    """
    if data is OMIT:
        return OMIT
    if not isinstance(data, (str, bytes, bytearray)):
        return data
    try:
        return json.loads(data, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        logger.debug("Sample is not JSON, keeping raw value: %r", data)
        return data


def add_if_true(data: Dict[str, Any], property_name: str, value: Any) -> Dict[str, Any]:
    """ Returns a copy of data with property_name set to value, or data itself if value is falsy. """
    if not value:
        return data
    result = dict(data)
    result[property_name] = value
    return result
