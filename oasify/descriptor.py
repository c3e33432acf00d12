"""
Classification of model type descriptors.

A descriptor's kind is decided once, up front, from the fields it carries:
a non-empty ``$ref`` wins over everything else, then ``type`` selects array,
object or parameter handling, and anything else is treated as a primitive.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from oasify.common import first_key, has_ref

EMPTY_DESCRIPTOR: Mapping[str, Any] = {}


@dataclass(frozen=True)
class RefNode:
    """A reference to a type defined elsewhere."""
    ref: str


@dataclass(frozen=True)
class ArrayNode:
    """An array type descriptor."""
    data: Mapping[str, Any]


@dataclass(frozen=True)
class ObjectNode:
    """An object type descriptor."""
    data: Mapping[str, Any]


@dataclass(frozen=True)
class ParameterNode:
    """
    A parameter wrapper. Only the first entry of its properties is meaningful;
    ``inner`` is that entry's descriptor, or None when there are no properties.
    """
    data: Mapping[str, Any]
    inner: Optional[Any]


@dataclass(frozen=True)
class PrimitiveNode:
    """Any other descriptor, including ones without a recognizable type."""
    data: Mapping[str, Any]


TypeNode = Union[RefNode, ArrayNode, ObjectNode, ParameterNode, PrimitiveNode]


def normalize_type(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """
    Returns the descriptor with a sequence ``type`` reduced to its first element.
    The input is never modified; a shallow copy is made only when needed.
    """
    type_value = data.get('type')
    if not isinstance(type_value, (list, tuple)):
        return data
    normalized = dict(data)
    if type_value:
        normalized['type'] = type_value[0]
    else:
        del normalized['type']
    return normalized


def classify(data: Any) -> Optional[TypeNode]:
    """
    Classifies a descriptor.

    Args:
        data: The descriptor. None and other falsy non-mappings yield None; any
            other non-mapping is treated as an empty primitive.

    Returns:
        The tagged node, or None if there is nothing to map.
    """
    if not isinstance(data, Mapping):
        if not data:
            return None
        return PrimitiveNode(EMPTY_DESCRIPTOR)

    data = normalize_type(data)
    if has_ref(data):
        return RefNode(data['$ref'])

    kind = data.get('type')
    if kind == 'array':
        return ArrayNode(data)
    if kind == 'object':
        return ObjectNode(data)
    if kind == 'parameter':
        properties = data.get('properties')
        inner = None
        if isinstance(properties, Mapping) and properties:
            inner = properties[first_key(properties)]
        return ParameterNode(data, inner)
    return PrimitiveNode(data)
