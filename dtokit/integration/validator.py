
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

"""The ``dtokit.integration.validator`` module contains
:class:`RuleValidator`, the default rule engine.

It understands rule tables that map dotted field paths to lists of directives:
::

    {
        'name': ['required', 'string', 'max:64'],
        'address': ['nullable', 'array'],
        'address.city': ['required_with:address', 'string'],
        'tags': ['array'],
        'tags.*.label': ['required', 'string'],
    }

A ``*`` segment matches every index of a list or every key of a dict.
Directives other than ``required``, ``required_with``, ``present`` and
``filled`` are only checked when the field has a non-blank value, and not at
all for ``None`` when the field is ``nullable``.

String directives are ``'name'`` or ``'name:arg1,arg2'``. Structured
directives are :class:`dtokit.integration.directive.Directive` instances. Any
other callable is called as ``rule(attribute, value, fail)`` and reports a
failure by calling ``fail(message)``.
"""

import logging
logger = logging.getLogger(__name__)

import re
import datetime

from collections import OrderedDict
from decimal import Decimal

from dtokit.error import ConfigurationError, ValidationError
from dtokit.integration.directive import Directive, InRule
from dtokit.integration.validation import ValidatorInterface, \
    StopOnFirstFailureMixin
from dtokit.util.datetime import is_date_string


_MISSING = object()

_INT_RE = re.compile(r'^[+-]?\d+$')
_FLOAT_RE = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

IMPLICIT_RULES = frozenset(['required', 'required_with', 'present', 'filled'])
"""Rules that are checked even when the field is missing or blank."""

DEFAULT_MESSAGES = {
    'required': "The :attribute field is required.",
    'required_with': "The :attribute field is required when :values is "
                                                                    "present.",
    'present': "The :attribute field must be present.",
    'filled': "The :attribute field must have a value.",
    'string': "The :attribute field must be a string.",
    'boolean': "The :attribute field must be true or false.",
    'integer': "The :attribute field must be an integer.",
    'numeric': "The :attribute field must be a number.",
    'array': "The :attribute field must be an array.",
    'date': "The :attribute field must be a valid date.",
    'in': "The selected :attribute is invalid.",
    'enum': "The selected :attribute is invalid.",
    'email': "The :attribute field must be a valid email address.",
    'regex': "The :attribute field format is invalid.",
    'min': {
        'numeric': "The :attribute field must be at least :min.",
        'string': "The :attribute field must be at least :min characters.",
        'array': "The :attribute field must have at least :min items.",
    },
    'max': {
        'numeric': "The :attribute field must not be greater than :max.",
        'string': "The :attribute field must not be greater than :max "
                                                                 "characters.",
        'array': "The :attribute field must not have more than :max items.",
    },
    'between': {
        'numeric': "The :attribute field must be between :min and :max.",
        'string': "The :attribute field must be between :min and :max "
                                                                 "characters.",
        'array': "The :attribute field must have between :min and :max "
                                                                      "items.",
    },
    'size': {
        'numeric': "The :attribute field must be :size.",
        'string': "The :attribute field must be :size characters.",
        'array': "The :attribute field must contain :size items.",
    },
}

_DEFAULT_CALLABLE_MESSAGE = "The :attribute field is invalid."


def _child(value, segment):
    if isinstance(value, dict):
        if segment in value:
            return value[segment]
        if _INT_RE.match(segment) and int(segment) in value:
            return value[int(segment)]
        return _MISSING

    if isinstance(value, (list, tuple)):
        if _INT_RE.match(segment):
            index = int(segment)
            if 0 <= index < len(value):
                return value[index]
        return _MISSING

    return _MISSING


def get_path(data, path):
    """Returns the value at the dotted ``path`` of ``data``. Missing values
    are returned as a sentinel that's distinct from ``None``."""

    value = data
    for segment in path.split('.'):
        value = _child(value, segment)
        if value is _MISSING:
            break
    return value


def expand_key(key, data):
    """Returns ``(path, value)`` pairs for every concrete path the wildcard
    ``key`` matches in ``data``."""

    paths = [([], data)]
    for segment in key.split('.'):
        next_paths = []
        for prefix, value in paths:
            if segment != '*':
                next_paths.append((prefix + [segment], _child(value, segment)))

            elif isinstance(value, dict):
                for k, v in value.items():
                    next_paths.append((prefix + [str(k)], v))

            elif isinstance(value, (list, tuple)):
                for i, v in enumerate(value):
                    next_paths.append((prefix + [str(i)], v))

        paths = next_paths

    return [('.'.join(p), v) for p, v in paths]


def is_filled(value):
    if value is _MISSING or value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ''
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True


def is_numeric(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    return isinstance(value, str) and _FLOAT_RE.match(value.strip()) is not None


def parse_directives(directives):
    """Returns the directives of a rule table entry as a list."""

    if isinstance(directives, str):
        return [d for d in directives.split('|') if d]

    if isinstance(directives, (list, tuple)):
        return list(directives)

    return [directives]


def parse_string_directive(directive):
    """Splits a string directive into its name and its arguments.

    >>> parse_string_directive('between:1,5')
    ('between', ['1', '5'])
    """

    name, _, arg = directive.partition(':')
    name = name.strip()
    if name == 'regex':
        return name, [arg]
    if arg == '':
        return name, []
    return name, [a.strip() for a in arg.split(',')]


class _Attribute(object):
    """The field under validation."""

    __slots__ = ('data', 'key', 'path', 'value', 'size_type')

    def __init__(self, data, key, path, value, directives):
        self.data = data
        self.key = key
        self.path = path
        self.value = value

        numeric = 'numeric' in directives or 'integer' in directives
        if numeric and is_numeric(value):
            self.size_type = 'numeric'
        elif isinstance(value, (list, tuple, dict)):
            self.size_type = 'array'
        else:
            self.size_type = 'string'

    def get_size(self):
        value = self.value
        if self.size_type == 'numeric':
            if isinstance(value, str):
                return float(value)
            return value

        if self.size_type == 'array':
            return len(value)

        return len(str(value))


class RuleValidator(StopOnFirstFailureMixin, ValidatorInterface):
    """The default :class:`dtokit.integration.validation.ValidatorInterface`
    implementation."""

    def validate(self, data, rules, messages=None, custom_attributes=None):
        if messages is None:
            messages = {}
        if custom_attributes is None:
            custom_attributes = {}

        errors = OrderedDict()
        for key, directives in rules.items():
            directives = parse_directives(directives)

            for path, value in expand_key(key, data):
                attr = _Attribute(data, key, path, value, directives)
                failures = self.check_field(attr, directives, messages,
                                                              custom_attributes)
                if len(failures) == 0:
                    continue

                errors.setdefault(path, []).extend(failures)
                if self.stop_on_first_failure_enabled:
                    raise ValidationError(errors)

        if len(errors) > 0:
            logger.debug("Validation failed: %r", errors)
            raise ValidationError(errors)

        return self.get_validated_data(data, rules)

    def get_validated_data(self, data, rules):
        """Returns the part of ``data`` the rule table talks about."""

        keys = set([k.split('.', 1)[0] for k in rules])
        return dict([(k, v) for k, v in data.items() if k in keys])

    def check_field(self, attr, directives, messages, custom_attributes):
        """Checks every directive against a single field. Returns the list of
        failure messages."""

        bail = 'bail' in directives
        nullable = 'nullable' in directives
        validatable = self.is_validatable(attr.value, nullable)

        retval = []
        for directive in directives:
            if directive == 'bail' or directive == 'nullable':
                continue

            implicit = False
            if isinstance(directive, str):
                name, args = parse_string_directive(directive)
                implicit = name in IMPLICIT_RULES
                if not (implicit or validatable):
                    continue

                check = getattr(self, 'validate_' + name, None)
                if check is None:
                    raise ConfigurationError("Unsupported validation rule %r"
                                                                 % (directive,))
                if check(attr, args):
                    continue

                message = self.get_message(attr, name, args, messages,
                                                              custom_attributes)

            elif isinstance(directive, Directive):
                if not validatable or directive.passes(attr.value):
                    continue

                message = self.get_message(attr, directive.name, [], messages,
                                                             custom_attributes,
                                                  directive.get_replacements())

            elif callable(directive):
                if not validatable:
                    continue

                failed = []
                directive(attr.path, attr.value, failed.append)
                if len(failed) == 0:
                    continue

                message = failed[0] or _DEFAULT_CALLABLE_MESSAGE
                message = message.replace(':attribute',
                          self.get_display_name(attr, custom_attributes))

            else:
                raise ConfigurationError("Unsupported validation rule %r"
                                                                 % (directive,))

            retval.append(message)

            # there's no point in checking an empty field further
            if bail or implicit:
                break

        return retval

    def is_validatable(self, value, nullable):
        if value is _MISSING:
            return False
        if isinstance(value, str) and value.strip() == '':
            return False
        if value is None and nullable:
            return False
        return True

    def get_display_name(self, attr, custom_attributes):
        if attr.path in custom_attributes:
            return custom_attributes[attr.path]
        if attr.key in custom_attributes:
            return custom_attributes[attr.key]
        return attr.path.replace('_', ' ')

    def get_message(self, attr, name, args, messages, custom_attributes,
                                                            replacements=None):
        message = None
        for k in (attr.path + '.' + name, attr.key + '.' + name, name):
            if k in messages:
                message = messages[k]
                break

        if message is None:
            message = DEFAULT_MESSAGES.get(name, _DEFAULT_CALLABLE_MESSAGE)

        if isinstance(message, dict):
            message = message.get(attr.size_type, _DEFAULT_CALLABLE_MESSAGE)

        if replacements is None:
            replacements = {}
        else:
            replacements = dict(replacements)

        if name in ('min', 'max', 'size') and len(args) > 0:
            replacements[':' + name] = args[0]
        elif name == 'between' and len(args) > 1:
            replacements[':min'] = args[0]
            replacements[':max'] = args[1]
        elif name == 'in':
            replacements[':values'] = ', '.join(args)
        elif name == 'required_with':
            replacements[':values'] = ' / '.join([
                custom_attributes.get(a, a.replace('_', ' ')) for a in args])

        replacements[':attribute'] = \
                                  self.get_display_name(attr, custom_attributes)

        # longer placeholders first so that :min doesn't eat :minimum
        for k in sorted(replacements, key=len, reverse=True):
            message = message.replace(k, str(replacements[k]))

        return message

    def _resolve_other(self, other, path):
        """Replaces wildcards in ``other`` with the indexes of ``path``."""

        if not '*' in other:
            return other

        path_segments = path.split('.')
        retval = []
        for i, segment in enumerate(other.split('.')):
            if segment == '*' and i < len(path_segments):
                segment = path_segments[i]
            retval.append(segment)
        return '.'.join(retval)

    def validate_required(self, attr, args):
        return is_filled(attr.value)

    def validate_required_with(self, attr, args):
        for other in args:
            if is_filled(get_path(attr.data, self._resolve_other(other,
                                                                   attr.path))):
                return is_filled(attr.value)
        return True

    def validate_present(self, attr, args):
        return attr.value is not _MISSING

    def validate_filled(self, attr, args):
        return attr.value is _MISSING or is_filled(attr.value)

    def validate_string(self, attr, args):
        return isinstance(attr.value, str)

    def validate_boolean(self, attr, args):
        value = attr.value
        if isinstance(value, bool):
            return True
        if isinstance(value, int):
            return value in (0, 1)
        return isinstance(value, str) and value in ('0', '1')

    def validate_integer(self, attr, args):
        value = attr.value
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        if isinstance(value, float):
            return value.is_integer()
        return isinstance(value, str) and _INT_RE.match(value.strip()) is not None

    def validate_numeric(self, attr, args):
        return is_numeric(attr.value)

    def validate_array(self, attr, args):
        return isinstance(attr.value, (list, tuple, dict))

    def validate_date(self, attr, args):
        value = attr.value
        if isinstance(value, datetime.date):
            return True
        return isinstance(value, str) and is_date_string(value)

    def _get_size_arg(self, args, name):
        if len(args) == 0:
            raise ConfigurationError("Validation rule %r needs an argument"
                                                                        % name)
        try:
            return float(args[0])
        except ValueError as e:
            raise ConfigurationError("Validation rule %r needs a numeric "
                                           "argument, not %r" % (name, args[0])) from e

    def validate_min(self, attr, args):
        return attr.get_size() >= self._get_size_arg(args, 'min')

    def validate_max(self, attr, args):
        return attr.get_size() <= self._get_size_arg(args, 'max')

    def validate_size(self, attr, args):
        return attr.get_size() == self._get_size_arg(args, 'size')

    def validate_between(self, attr, args):
        size = attr.get_size()
        return self._get_size_arg(args, 'between') <= size \
                                  <= self._get_size_arg(args[1:], 'between')

    def validate_in(self, attr, args):
        return InRule(args).passes(attr.value)

    def validate_email(self, attr, args):
        value = attr.value
        return isinstance(value, str) and _EMAIL_RE.match(value) is not None

    def validate_regex(self, attr, args):
        if not isinstance(attr.value, (str, int, float)):
            return False

        pattern = args[0]
        flags = 0
        # /pattern/flags, the way other rule engines write them
        if len(pattern) > 1 and pattern[0] == '/' and pattern.rfind('/') > 0:
            end = pattern.rfind('/')
            if 'i' in pattern[end + 1:]:
                flags |= re.IGNORECASE
            pattern = pattern[1:end]

        return re.search(pattern, str(attr.value), flags) is not None
