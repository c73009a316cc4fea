
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

"""The ``dtokit.integration.directive`` module contains the structured rule
directives, ie. the rules that carry parameters that don't fit in a
``'name:arg'`` string.

Structured directives are deduplicated by their type, so a field can have at
most one of each.
"""

import logging
logger = logging.getLogger(__name__)

import re
import enum


_INT_RE = re.compile(r'^[+-]?\d+$')


class Directive(object):
    """Base class for structured directives.

    :attr:`name` is the key used to look up the default message and the custom
    messages of a DTO, just like the name part of a string directive.
    """

    name = None

    def passes(self, value):
        raise NotImplementedError()

    def get_replacements(self):
        """Placeholders other than ``:attribute`` to use in messages."""

        return {}


class EnumRule(Directive):
    """Accepts backing values (or members) of an :class:`enum.Enum` subclass.

    :param enum_cls: The enum class.
    :param only: When given, only these members are accepted.
    :param except_: When given, these members are refused.
    """

    name = 'enum'

    def __init__(self, enum_cls, only=None, except_=None):
        self.enum_cls = enum_cls
        self.only = only
        self.except_ = except_

    def __repr__(self):
        return "EnumRule(%s, only=%r, except_=%r)" % (self.enum_cls.__name__,
                                                      self.only, self.except_)

    def __eq__(self, other):
        return isinstance(other, EnumRule) \
                                       and other.enum_cls is self.enum_cls \
                                       and other.only == self.only \
                                       and other.except_ == self.except_

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((EnumRule, self.enum_cls))

    def _to_members(self, values):
        retval = []
        for v in values:
            member = self.get_member(v)
            if member is None:
                logger.warning("%r is not a member of %r, ignored", v,
                                                                  self.enum_cls)
            else:
                retval.append(member)
        return retval

    def get_member(self, value):
        """Returns the member for the given value, or None when there's no such
        member."""

        if isinstance(value, self.enum_cls):
            return value

        if isinstance(value, bool) or not isinstance(value, (str, int)):
            return None

        if isinstance(value, str) and _INT_RE.match(value):
            if isinstance(next(iter(self.enum_cls)).value, int):
                value = int(value)

        try:
            return self.enum_cls(value)
        except ValueError:
            return None

    def passes(self, value):
        member = self.get_member(value)
        if member is None:
            return False

        if self.only is not None and member not in self._to_members(self.only):
            return False

        if self.except_ is not None and \
                                     member in self._to_members(self.except_):
            return False

        return True


class InRule(Directive):
    """Accepts a fixed list of values. Values are compared by equality first,
    then by their string forms, so ``'1'`` passes ``InRule([1, 2])``."""

    name = 'in'

    def __init__(self, values):
        if isinstance(values, enum.EnumMeta):
            values = [m.value for m in values]

        self.values = list(values)

    def __repr__(self):
        return "InRule(%r)" % (self.values,)

    def __eq__(self, other):
        return isinstance(other, InRule) and other.values == self.values

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((InRule, tuple(map(str, self.values))))

    def passes(self, value):
        if isinstance(value, (list, tuple)):
            return all(self._passes_one(v) for v in value)

        return self._passes_one(value)

    def _passes_one(self, value):
        if isinstance(value, enum.Enum):
            value = value.value

        for v in self.values:
            if isinstance(v, enum.Enum):
                v = v.value

            if v == value and type(v) is type(value):
                return True

            if isinstance(value, (dict, list, tuple)) or value is None:
                continue

            if _stringify(v) == _stringify(value):
                return True

        return False

    def get_replacements(self):
        return {':values': ', '.join([_stringify(v) for v in self.values])}


def _stringify(value):
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return '1' if value else '0'
    return str(value)
