"""
Test module for scope extensions.
"""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from oasify.extensions import extension_name, get_extensions


class TestExtensions(unittest.TestCase):
    """Test cases for get_extensions."""

    def test_empty(self):
        self.assertEqual(get_extensions(None), {})
        self.assertEqual(get_extensions([]), {})
        self.assertEqual(get_extensions(7), {})

    def test_entries(self):
        extensions = [
            {'extensionPattern': 'owner', 'extensionValue': 'team-a'},
            {'extensionPattern': 'x-internal', 'extensionValue': True},
            {'extensionValue': 'no pattern'},
            'not an entry'
        ]
        self.assertEqual(get_extensions(extensions), {'x-owner': 'team-a', 'x-internal': True})

    def test_mapping(self):
        self.assertEqual(get_extensions({'owner': 'team-a', 'x-rank': 2, '': 'skipped'}), {'x-owner': 'team-a', 'x-rank': 2})

    def test_values_are_copied(self):
        value = {'nested': [1]}
        result = get_extensions([{'extensionPattern': 'meta', 'extensionValue': value}])
        result['x-meta']['nested'].append(2)
        self.assertEqual(value, {'nested': [1]})

    def test_extension_name(self):
        self.assertEqual(extension_name('a'), 'x-a')
        self.assertEqual(extension_name('x-a'), 'x-a')


if __name__ == '__main__':
    unittest.main()
