#!/usr/bin/env python
#
# dtokit - Copyright (C) dtokit contributors.
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 2.1 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301
#

import unittest

from dtokit.util.dictutil import merge


class DictUtilTest(unittest.TestCase):
    def test_merge(self):
        a = {'db': {'host': 'h', 'port': 1}, 'apps': ['x'], 'debug': False}
        b = {'db': {'port': 2}, 'apps': ['x', 'y'], 'debug': True}

        self.assertEqual(merge(a, b), {
            'db': {'host': 'h', 'port': 2},
            'apps': ['x', 'y'],
            'debug': True,
        })
        self.assertEqual(a['db'], {'host': 'h', 'port': 1})

    def test_merge_replaces_mismatching_types(self):
        self.assertEqual(merge({'a': {'b': 1}}, {'a': 5}), {'a': 5})
        self.assertEqual(merge(None, {'a': 1}, {}), {'a': 1})


if __name__ == '__main__':
    unittest.main()
