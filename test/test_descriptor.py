"""
Test module for descriptor classification.
"""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from oasify.descriptor import (
    ArrayNode,
    ObjectNode,
    ParameterNode,
    PrimitiveNode,
    RefNode,
    classify,
    normalize_type
)


class TestClassify(unittest.TestCase):
    """Test cases for classify."""

    def test_none(self):
        self.assertIsNone(classify(None))

    def test_ref_wins(self):
        node = classify({'$ref': '#model/definitions/A', 'type': 'object'})
        self.assertEqual(node, RefNode('#model/definitions/A'))

    def test_ref_after_type_sequence(self):
        node = classify({'$ref': 'a.json', 'type': ['array', 'null']})
        self.assertIsInstance(node, RefNode)

    def test_kinds(self):
        self.assertIsInstance(classify({'type': 'array'}), ArrayNode)
        self.assertIsInstance(classify({'type': 'object'}), ObjectNode)
        self.assertIsInstance(classify({'type': 'parameter'}), ParameterNode)
        self.assertIsInstance(classify({'type': 'string'}), PrimitiveNode)
        self.assertIsInstance(classify({}), PrimitiveNode)
        self.assertIsInstance(classify({'allOf': [{'type': 'string'}]}), PrimitiveNode)

    def test_type_sequence(self):
        node = classify({'type': ['object', 'null'], 'required': ['a']})
        self.assertIsInstance(node, ObjectNode)
        self.assertEqual(node.data['type'], 'object')

    def test_parameter_inner(self):
        node = classify({'type': 'parameter', 'properties': {'p': {'type': 'string'}, 'q': {'type': 'integer'}}})
        self.assertEqual(node.inner, {'type': 'string'})
        self.assertIsNone(classify({'type': 'parameter', 'properties': {}}).inner)
        self.assertIsNone(classify({'type': 'parameter'}).inner)

    def test_non_mapping(self):
        node = classify(['type', 'object'])
        self.assertIsInstance(node, PrimitiveNode)
        self.assertEqual(dict(node.data), {})

    def test_falsy_non_mapping(self):
        for value in (False, 0, '', []):
            self.assertIsNone(classify(value))
        self.assertIsInstance(classify({}), PrimitiveNode)


class TestNormalizeType(unittest.TestCase):
    """Test cases for normalize_type."""

    def test_input_untouched(self):
        data = {'type': ['integer', 'string']}
        normalized = normalize_type(data)
        self.assertEqual(normalized, {'type': 'integer'})
        self.assertEqual(data, {'type': ['integer', 'string']})

    def test_scalar_type_returns_same_object(self):
        data = {'type': 'string'}
        self.assertIs(normalize_type(data), data)

    def test_empty_sequence_drops_type(self):
        self.assertEqual(normalize_type({'type': [], 'format': 'x'}), {'format': 'x'})


if __name__ == '__main__':
    unittest.main()
