
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

"""Small helpers for the plain dict/list structures DTOs are built from."""


def merge(*dicts):
    """Merges dicts recursively, later values win.

    Nested dicts are merged key by key. Lists are extended with the items that
    aren't already there, so merging configuration layers doesn't duplicate
    entries.

    >>> merge({'a': {'b': 1}, 'l': [1]}, {'a': {'c': 2}, 'l': [1, 2]})
    {'a': {'b': 1, 'c': 2}, 'l': [1, 2]}
    """

    retval = {}
    for d in dicts:
        if not d:
            continue

        for k, v in d.items():
            prev = retval.get(k, None)
            if isinstance(prev, dict) and isinstance(v, dict):
                retval[k] = merge(prev, v)

            elif isinstance(prev, list) and isinstance(v, list):
                retval[k] = prev + [x for x in v if not x in prev]

            else:
                retval[k] = v

    return retval
