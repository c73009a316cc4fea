
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

"""Process-wide configuration.

Keys are dotted strings like ``'dto.to_response_format'``. Unset keys fall back
to the default the caller passes, which is normally a value from
:mod:`dtokit.const`.

>>> from dtokit import config
>>> config.configure({'dto.to_array_config.datetime_format': '%Y-%m-%d'})
>>> config.get('dto.to_array_config.datetime_format')
'%Y-%m-%d'
"""

import logging
logger = logging.getLogger(__name__)

import threading

from dtokit.const import CONFIG_PREFIX


_lock = threading.Lock()
_config = {}
_test_config = {}


def configure(mapping=None, **kwargs):
    """Merges the given keys into the process-wide configuration. Keys without
    the ``dto.`` prefix get it prepended, so keyword arguments work too."""

    values = {}
    if mapping is not None:
        values.update(mapping)
    values.update(kwargs)

    with _lock:
        for k, v in values.items():
            if not k.startswith(CONFIG_PREFIX):
                k = CONFIG_PREFIX + k
            logger.debug("Setting config %r to %r", k, v)
            _config[k] = v


def get(key, default=None):
    """Returns the value of ``key``, or ``default`` when it's not set."""

    if key in _test_config:
        return _test_config[key]

    return _config.get(key, default)


def reset():
    """Forgets everything that was set with :func:`configure`."""

    with _lock:
        _config.clear()


def set_for_test(key=None, value=None):
    """Overrides ``key`` with ``value`` until the next call without arguments,
    which removes all overrides."""

    with _lock:
        if key is None:
            _test_config.clear()
            return

        _test_config[key] = value
