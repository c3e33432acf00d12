"""
Test module for the shared helpers.
"""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from oasify.common import (
    OMIT,
    add_if_true,
    compact,
    copy_value,
    first_key,
    has_choice,
    has_ref,
    parse_example,
    pick,
    truthy_or_omit
)


class TestPredicates(unittest.TestCase):
    """Test cases for has_ref and has_choice."""

    def test_has_ref(self):
        self.assertTrue(has_ref({'$ref': '#/components/schemas/A'}))
        self.assertFalse(has_ref({'$ref': ''}))
        self.assertFalse(has_ref({'type': 'string'}))
        self.assertFalse(has_ref(None))
        self.assertFalse(has_ref('$ref'))

    def test_has_choice(self):
        for choice in ('allOf', 'anyOf', 'oneOf'):
            self.assertTrue(has_choice({choice: [{'type': 'string'}]}))
        self.assertTrue(has_choice({'not': {'type': 'string'}}))
        self.assertTrue(has_choice({'allOf': []}))
        self.assertFalse(has_choice({'allOf': None}))
        self.assertFalse(has_choice({'allOf': False}))
        self.assertFalse(has_choice({'not': ''}))
        self.assertFalse(has_choice({'oneOf': 0}))
        self.assertTrue(has_choice({'not': {}}))
        self.assertFalse(has_choice({'type': 'object'}))
        self.assertFalse(has_choice(None))


class TestParseExample(unittest.TestCase):
    """Test cases for parse_example."""

    def test_json(self):
        self.assertEqual(parse_example('{"x":1}'), {'x': 1})
        self.assertEqual(parse_example('[1, 2]'), [1, 2])
        self.assertEqual(parse_example('3'), 3)

    def test_fallback(self):
        self.assertEqual(parse_example('not json'), 'not json')
        self.assertEqual(parse_example(''), '')

    def test_non_json_constants(self):
        for sample in ('NaN', 'Infinity', '-Infinity', '{"x": NaN}'):
            self.assertEqual(parse_example(sample), sample)

    def test_too_deep(self):
        sample = '[' * 100000 + ']' * 100000
        self.assertEqual(parse_example(sample), sample)

    def test_non_string(self):
        self.assertEqual(parse_example({'x': 1}), {'x': 1})
        self.assertIsNone(parse_example(None))
        self.assertIs(parse_example(OMIT), OMIT)


class TestOmit(unittest.TestCase):
    """Test cases for the OMIT marker helpers."""

    def test_omit_is_falsy_singleton(self):
        self.assertFalse(OMIT)
        self.assertIs(type(OMIT)(), OMIT)

    def test_pick(self):
        data = {'a': None, 'b': [1]}
        self.assertIsNone(pick(data, 'a'))
        self.assertIs(pick(data, 'c'), OMIT)
        copied = pick(data, 'b')
        copied.append(2)
        self.assertEqual(data['b'], [1])

    def test_truthy_or_omit(self):
        self.assertEqual(truthy_or_omit('x'), 'x')
        self.assertIs(truthy_or_omit(''), OMIT)
        self.assertIs(truthy_or_omit([]), OMIT)
        self.assertIs(truthy_or_omit(OMIT), OMIT)

    def test_copy_value(self):
        value = {'a': [1]}
        copied = copy_value(value)
        self.assertEqual(copied, value)
        self.assertIsNot(copied['a'], value['a'])
        deep = []
        for _ in range(5000):
            deep = [deep]
        self.assertIs(copy_value(deep), deep)

    def test_compact(self):
        self.assertEqual(compact({'a': OMIT, 'b': None, 'c': 0}), {'b': None, 'c': 0})

    def test_first_key(self):
        self.assertEqual(first_key({'z': 1, 'a': 2}), 'z')
        self.assertIsNone(first_key({}))

    def test_add_if_true(self):
        data = {'type': 'string'}
        self.assertIs(add_if_true(data, 'nullable', False), data)
        result = add_if_true(data, 'nullable', True)
        self.assertEqual(result, {'type': 'string', 'nullable': True})
        self.assertEqual(data, {'type': 'string'})


if __name__ == '__main__':
    unittest.main()
