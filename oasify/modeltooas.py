"""
Model to OpenAPI converter.

This module converts model type descriptors (JSON Schema flavored, with the model
extensions ``sample``, ``xmlName``, ``additionalPropControl`` and friends) into
OpenAPI Components schema objects. The conversion is a structural rewrite: the
input tree is never modified and references are rewritten but not dereferenced.
"""

# pylint: disable=line-too-long

import json
import logging
import os
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

import requests
import yaml

from oasify.common import CHOICE_KEYWORDS, OMIT, add_if_true, compact, parse_example, pick, truthy_or_omit
from oasify.descriptor import ArrayNode, ObjectNode, ParameterNode, RefNode, classify
from oasify.extensions import get_extensions
from oasify.references import EXTENDED_DIALECT, REFERENCE_DIALECTS, SIMPLE_DIALECT, ReferenceRewriter, prepare_reference_name

logger = logging.getLogger(__name__)

BOOLEAN_ADDITIONAL_PROPERTIES = 'Boolean'

PRIMITIVE_PASSTHROUGH_KEYWORDS = [
    'description', 'exclusiveMinimum', 'exclusiveMaximum', 'minimum', 'maximum',
    'enum', 'pattern', 'default', 'minLength', 'maxLength', 'multipleOf'
]

YAML_EXTENSIONS = ('.yaml', '.yml')


class ModelToOasConverter:
    """
    Converts model type descriptors to OpenAPI schema objects.

    Attributes:
        reference_dialect: 'extended' (multi-file references) or 'simple'.
        property_aware_combinators: Flag to map ``branch.properties[key]`` instead of the
            branch itself when a combinator is merged at property level.
        emit_nullable: Flag to carry ``nullable`` through to the output.
        max_depth: The maximum nesting depth that is mapped.
        extension_resolver: Maps ``xml.scopesExtensions`` to extension fields.
        reference_name_normalizer: Normalizes rewritten references.
    """

    def __init__(self) -> None:
        """Initialize the converter with the current (extended) behavior."""
        self.reference_dialect = EXTENDED_DIALECT
        self.property_aware_combinators = True
        self.emit_nullable = True
        self.max_depth = 128
        self.extension_resolver: Callable[[Any], Dict[str, Any]] = get_extensions
        self.reference_name_normalizer: Callable[[str], str] = prepare_reference_name
        self.content_cache: Dict[str, str] = {}

    @classmethod
    def legacy(cls) -> 'ModelToOasConverter':
        """Returns a converter that behaves like the older single-file mapper."""
        converter = cls()
        converter.reference_dialect = SIMPLE_DIALECT
        converter.property_aware_combinators = False
        converter.emit_nullable = False
        return converter

    def reference_rewriter(self) -> ReferenceRewriter:
        """Returns a reference rewriter for the configured dialect."""
        return ReferenceRewriter(self.reference_dialect, self.reference_name_normalizer)

    def map_type(self, data: Any, key: Optional[str] = None, recursion_depth: int = 1) -> Optional[Dict[str, Any]]:
        """
        Maps a model type descriptor to an OpenAPI schema object.

        Args:
            data: The type descriptor. None yields None.
            key: The property name under which the descriptor sits, if any. Used to
                pick matching branches out of combinators.
            recursion_depth: The current nesting depth.

        Returns:
            A freshly built schema object, or None if there is nothing to map.
        """
        if recursion_depth == 1 and self.reference_dialect not in REFERENCE_DIALECTS:
            raise ValueError(f"Unknown reference dialect: {self.reference_dialect}. Expected one of {', '.join(REFERENCE_DIALECTS)}")
        if recursion_depth > self.max_depth:
            logger.warning("Maximum mapping depth %d exceeded at property %s, omitting nested type", self.max_depth, key)
            return None

        # a sequence type is mapped as its first entry, without the property key
        if isinstance(data, Mapping) and isinstance(data.get('type'), (list, tuple)):
            key = None
        node = classify(data)
        if node is None:
            return None
        if isinstance(node, RefNode):
            return self.reference_rewriter().rewrite(node.ref)
        if isinstance(node, ArrayNode):
            return self.map_array(node.data, key, recursion_depth)
        if isinstance(node, ObjectNode):
            return self.map_object(node.data, key, recursion_depth)
        if isinstance(node, ParameterNode):
            if node.inner is None:
                return None
            return self.map_type(node.inner, recursion_depth=recursion_depth + 1)
        return self.map_primitive(node.data)

    def map_array(self, data: Mapping[str, Any], key: Optional[str], recursion_depth: int) -> Dict[str, Any]:
        """Maps an array descriptor, merged with its combinators."""
        array_props = compact({
            'type': pick(data, 'type'),
            'items': self.map_array_items(data.get('items'), recursion_depth),
            'collectionFormat': pick(data, 'collectionFormat'),
            'minItems': pick(data, 'minItems'),
            'maxItems': pick(data, 'maxItems'),
            'uniqueItems': truthy_or_omit(pick(data, 'uniqueItems')),
            'nullable': pick(data, 'nullable') if self.emit_nullable else OMIT,
            'discriminator': pick(data, 'discriminator'),
            'readOnly': pick(data, 'readOnly'),
            'xml': self.map_xml(data.get('xml'))
        })
        array_props.update(self.map_choices(data, key, recursion_depth))
        return array_props

    def map_array_items(self, items: Any, recursion_depth: int) -> Dict[str, Any]:
        """Maps the items of an array. Only the first element of an items list is used."""
        if isinstance(items, (list, tuple)):
            mapped = self.map_type(items[0], recursion_depth=recursion_depth + 1) if items else None
        else:
            mapped = self.map_type(items, recursion_depth=recursion_depth + 1) if items else None
        return dict(mapped or {})

    def map_object(self, data: Mapping[str, Any], key: Optional[str], recursion_depth: int) -> Dict[str, Any]:
        """Maps an object descriptor, merged with its combinators."""
        object_props = compact({
            'type': pick(data, 'type'),
            'description': truthy_or_omit(pick(data, 'description')),
            'required': truthy_or_omit(pick(data, 'required')),
            'properties': self.map_properties(data.get('properties'), recursion_depth),
            'minProperties': pick(data, 'minProperties'),
            'maxProperties': pick(data, 'maxProperties'),
            'additionalProperties': self.map_additional_properties(data),
            'nullable': pick(data, 'nullable') if self.emit_nullable else OMIT,
            'discriminator': pick(data, 'discriminator'),
            'readOnly': pick(data, 'readOnly'),
            'example': parse_example(pick(data, 'sample')),
            'xml': self.map_xml(data.get('xml'))
        })
        object_props.update(self.map_choices(data, key, recursion_depth))
        return object_props

    def map_properties(self, properties: Any, recursion_depth: int) -> Any:
        """
        Maps the properties of an object, keyed by the original property names.

        Returns OMIT when the source has no properties; an empty mapping stays empty.
        """
        if not isinstance(properties, Mapping):
            return OMIT
        mapped_properties: Dict[str, Any] = {}
        for prop_name, prop_schema in properties.items():
            mapped = self.map_type(prop_schema, prop_name, recursion_depth + 1)
            if mapped is not None:
                mapped_properties[prop_name] = mapped
        return mapped_properties

    def map_primitive(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Maps a primitive descriptor. ``format`` falls back to the legacy ``mode`` field."""
        primitive_props: Dict[str, Any] = {
            'type': pick(data, 'type'),
            'format': data.get('format') or pick(data, 'mode'),
        }
        for keyword in PRIMITIVE_PASSTHROUGH_KEYWORDS:
            primitive_props[keyword] = pick(data, keyword)
        primitive_props['xml'] = self.map_xml(data.get('xml'))
        primitive_props['example'] = pick(data, 'sample')
        primitive_props = compact(primitive_props)

        if not self.emit_nullable:
            return primitive_props
        return add_if_true(primitive_props, 'nullable', data.get('nullable'))

    def map_additional_properties(self, data: Mapping[str, Any]) -> Any:
        """
        Maps additionalProperties as selected by ``additionalPropControl``.

        A 'Boolean' control passes the literal value through; a falsy literal is omitted.
        Any other control produces a schema from the object type fields.
        """
        control = data.get('additionalPropControl')
        if not control:
            return OMIT
        if control == BOOLEAN_ADDITIONAL_PROPERTIES:
            return truthy_or_omit(pick(data, 'additionalProperties'))

        object_type = pick(data, 'additionalPropertiesObjectType')
        if object_type == 'integer':
            return compact({
                'type': object_type,
                'format': pick(data, 'additionalPropertiesIntegerFormat')
            })
        return compact({'type': object_type})

    def map_xml(self, xml: Any) -> Any:
        """Maps the model xml descriptor to an OpenAPI xml object plus its extensions."""
        if not isinstance(xml, Mapping):
            return OMIT
        xml_props = compact({
            'name': pick(xml, 'xmlName'),
            'namespace': pick(xml, 'xmlNamespace'),
            'prefix': pick(xml, 'xmlPrefix'),
            'attribute': pick(xml, 'xmlAttribute'),
            'wrapped': pick(xml, 'xmlWrapped')
        })
        xml_props.update(self.extension_resolver(xml.get('scopesExtensions')))
        return xml_props

    def map_choice(self, item: Any, key: Optional[str], recursion_depth: int) -> Optional[Dict[str, Any]]:
        """Maps one combinator branch, preferring ``branch.properties[key]`` when enabled."""
        if self.property_aware_combinators and key is not None and isinstance(item, Mapping):
            branch_properties = item.get('properties')
            if isinstance(branch_properties, Mapping):
                choice_value = branch_properties.get(key)
                if choice_value:
                    return self.map_type(choice_value, recursion_depth=recursion_depth + 1)
        return self.map_type(item, recursion_depth=recursion_depth + 1)

    def map_choices(self, data: Mapping[str, Any], key: Optional[str], recursion_depth: int) -> Dict[str, Any]:
        """
        Maps allOf, anyOf, oneOf and not. Only keywords present on the source appear in
        the result; empty values are passed through as they are.
        """
        choices: Dict[str, Any] = {}
        for choice in CHOICE_KEYWORDS:
            if choice not in data:
                continue
            value = data[choice]
            if not value:
                choices[choice] = pick(data, choice)
            elif choice == 'not':
                choices[choice] = self.map_choice(value, key, recursion_depth)
            elif isinstance(value, (list, tuple)):
                choices[choice] = [self.map_choice(item, key, recursion_depth) for item in value]
            else:
                choices[choice] = [self.map_choice(value, key, recursion_depth)]
        return choices

    def convert_model_to_components(self, model: Union[dict, str]) -> dict:
        """
        Converts a whole model document to an OpenAPI components object.

        Args:
            model: The model document as a dictionary or JSON string. Definitions are
                read from ``definitions`` as category -> name -> descriptor. A document
                without definitions is converted as a single schema.

        Returns:
            A ``{'components': {...}}`` document.

        Raises:
            TypeError: If the input type is not supported.
        """
        if isinstance(model, str):
            model = json.loads(model)
        if not isinstance(model, dict):
            raise TypeError(f"Expected dict or str, got {type(model)}")

        components: Dict[str, Dict[str, Any]] = {}
        definitions = model.get('definitions')
        if isinstance(definitions, Mapping):
            for category, entries in definitions.items():
                if not isinstance(entries, Mapping):
                    logger.debug("Skipping definitions category %s, not a mapping", category)
                    continue
                mapped_entries: Dict[str, Any] = {}
                for name, descriptor in entries.items():
                    mapped = self.map_type(descriptor)
                    if mapped is not None:
                        mapped_entries[name] = mapped
                components[category] = mapped_entries
        else:
            name = model.get('title') or 'Model'
            mapped = self.map_type(model)
            components['schemas'] = {name: mapped} if mapped is not None else {}

        return {'components': components}

    def fetch_content(self, url: str) -> str:
        """
        Fetch content from a URL or file path.

        Args:
            url: The URL or file path to fetch content from.

        Returns:
            The content as a string.

        Raises:
            requests.RequestException: If there is an error fetching from HTTP/HTTPS.
            FileNotFoundError: If the file does not exist.
        """
        if url in self.content_cache:
            return self.content_cache[url]

        parsed_url = urlparse(url)

        if parsed_url.scheme in ['http', 'https']:
            response = requests.get(url, timeout=30)
            response.raise_for_status()
            content = response.text
        elif parsed_url.scheme == 'file' or not parsed_url.scheme:
            file_path = parsed_url.path if parsed_url.scheme == 'file' else url
            if os.name == 'nt' and file_path.startswith('/'):
                file_path = file_path[1:]
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        else:
            raise ValueError(f"Unsupported URL scheme: {parsed_url.scheme}")

        self.content_cache[url] = content
        return content

    def convert_model_file_to_oas(self, model_file_path: str, oas_file_path: Optional[str] = None, single_type: bool = False) -> Optional[dict]:
        """
        Convert a model file to OpenAPI.

        Args:
            model_file_path: Path or URL of the model document (JSON or YAML).
            oas_file_path: Optional path for the output; '.yaml'/'.yml' writes YAML, anything else JSON.
            single_type: Treat the input as one type descriptor instead of a model document.

        Returns:
            The converted document.
        """
        model = load_document(self.fetch_content(model_file_path))
        if single_type:
            result = self.map_type(model)
        else:
            result = self.convert_model_to_components(model)

        if oas_file_path:
            write_document(result, oas_file_path)
        return result


def load_document(content: str) -> Any:
    """
    Parses a document as JSON, falling back to YAML.

    Raises:
        ValueError: If the content is neither JSON nor YAML.
    """
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse model document as JSON or YAML: {e}") from e


def write_document(document: Any, file_path: str) -> None:
    """Writes a document as YAML or JSON depending on the file extension."""
    dir_name = os.path.dirname(file_path)
    if dir_name:
        os.makedirs(dir_name, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        if file_path.lower().endswith(YAML_EXTENSIONS):
            yaml.safe_dump(document, f, sort_keys=False, allow_unicode=True)
        else:
            json.dump(document, f, indent=2)


def _configure(converter: ModelToOasConverter, reference_dialect: Optional[str], property_aware_combinators: Optional[bool], emit_nullable: Optional[bool]) -> ModelToOasConverter:
    if reference_dialect is not None:
        converter.reference_dialect = reference_dialect
    if property_aware_combinators is not None:
        converter.property_aware_combinators = property_aware_combinators
    if emit_nullable is not None:
        converter.emit_nullable = emit_nullable
    return converter


def convert_model_type_to_oas(
    input_data: str,
    reference_dialect: str = EXTENDED_DIALECT,
    property_aware_combinators: bool = True,
    emit_nullable: bool = True
) -> str:
    """
    Convert a single model type descriptor to an OpenAPI schema object.

    Args:
        input_data: The descriptor as a JSON string.
        reference_dialect: 'extended' or 'simple'.
        property_aware_combinators: Flag to map matching properties out of combinator branches.
        emit_nullable: Flag to carry nullable through.

    Returns:
        The schema object as a JSON string ('null' when there is nothing to map).
    """
    converter = _configure(ModelToOasConverter(), reference_dialect, property_aware_combinators, emit_nullable)
    result = converter.map_type(json.loads(input_data))
    return json.dumps(result, indent=2)


def convert_model_to_oas_files(
    model_file_path: str,
    oas_file_path: str,
    reference_dialect: Optional[str] = None,
    no_property_aware_combinators: bool = False,
    no_nullable: bool = False,
    legacy: bool = False,
    single_type: bool = False
) -> None:
    """
    Convert a model file to an OpenAPI components (or single schema) file.

    Args:
        model_file_path: Path to the input model file.
        oas_file_path: Path to the output file.
        reference_dialect: 'extended' or 'simple'; defaults to the converter's setting.
        no_property_aware_combinators: Map combinator branches as they are.
        no_nullable: Do not emit nullable.
        legacy: Start from the older single-file mapper settings.
        single_type: Treat the input as one type descriptor.
    """
    converter = ModelToOasConverter.legacy() if legacy else ModelToOasConverter()
    _configure(
        converter,
        reference_dialect,
        False if no_property_aware_combinators else None,
        False if no_nullable else None
    )
    converter.convert_model_file_to_oas(model_file_path, oas_file_path, single_type)



def convert_model_type_to_oas_files(
    model_file_path: str,
    oas_file_path: str,
    reference_dialect: Optional[str] = None,
    no_property_aware_combinators: bool = False,
    no_nullable: bool = False,
    legacy: bool = False
) -> None:
    """
    Convert a file holding a single model type descriptor to an OpenAPI schema object file.

    Args:
        model_file_path: Path to the input descriptor file.
        oas_file_path: Path to the output file.
        reference_dialect: 'extended' or 'simple'; defaults to the converter's setting.
        no_property_aware_combinators: Map combinator branches as they are.
        no_nullable: Do not emit nullable.
        legacy: Start from the older single-file mapper settings.
    """
    convert_model_to_oas_files(
        model_file_path,
        oas_file_path,
        reference_dialect=reference_dialect,
        no_property_aware_combinators=no_property_aware_combinators,
        no_nullable=no_nullable,
        legacy=legacy,
        single_type=True
    )
