
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

"""The module for memoization stuff.

Schema compilation results are kept here for the lifetime of the process.
Nothing is ever evicted, entries are only dropped by an explicit ``reset()``
which is meant for tests.

Values are computed outside of any lock, then published under it. Two threads
racing for the same key may both compute, the first published value wins and
is what every caller gets from then on.
"""


import logging
logger = logging.getLogger(__name__)

import threading


class memoize(object):
    """A memoization decorator that keeps caching until reset."""

    registry = []

    def __init__(self, func):
        self.func = func
        self.memo = {}
        self.lock = threading.RLock()
        memoize.registry.append(self)

    def __call__(self, *args, **kwargs):
        key = self.get_key(args, kwargs)
        try:
            return self.memo[key]
        except KeyError:
            pass

        value = self.func(*args, **kwargs)
        with self.lock:
            # somebody else may have published while we were computing
            if not key in self.memo:
                self.memo[key] = value
            return self.memo[key]

    def get_key(self, args, kwargs):
        return tuple(args), tuple(kwargs.items())

    def reset(self):
        with self.lock:
            self.memo = {}


def reset_all():
    """Drops every memoized value. Only useful in tests."""

    logger.debug("Resetting %d memoizers", len(memoize.registry))
    for memo in memoize.registry:
        memo.reset()
