
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

"""The ``dtokit.model.rules`` module contains :class:`ValidationRules`, the
per-field descriptor that knows how to validate and how to build the value of a
DTO field.

A descriptor is either given explicitly, using ``typing.Annotated``: ::

    class UserDTO(BaseDTO):
        name: Annotated[str, ValidationRules(max_length=64)]
        tags: list[str] = []

or derived from the annotation alone. Either way it's filled with what the type
annotation says and normalized once, the first time the owning class is looked
at. After that it's never modified again.
"""

import logging
logger = logging.getLogger(__name__)

import re
import copy
import enum
import types
import typing
import decimal
import datetime
import functools
import threading

from io import IOBase

from dtokit import config
from dtokit.const import DEFAULT_NULLABLE_EMPTY_STRING_AS_NULL, \
    DEFAULT_CAST_SCALAR_STRINGS
from dtokit.error import ConfigurationError, CoercionError
from dtokit.integration.directive import Directive, EnumRule, InRule
from dtokit.model.file import UploadedFile
from dtokit.util.datetime import make_temporal
from dtokit.util.typing import describe, is_class, scalar_category, \
    get_collection_items


PRIMITIVE_TYPES = ('string', 'boolean', 'integer', 'numeric', 'array')
"""Primitive type categories. At most one of them can be set on a field."""

KIND_SCHEMA = 'schema'
"""Object reference to another DTO. Its own rule table is nested."""

KIND_TEMPORAL = 'temporal'
"""Object reference to a :class:`datetime.date` or
:class:`datetime.datetime` subclass."""

KIND_PASSTHROUGH = 'passthrough'
"""Object reference to a type whose values are assigned as they come, like
uploaded files."""

KIND_PLAIN = 'plain'
"""Object reference to a class that's not a DTO. Its annotated fields are
validated but values can't be built out of raw data."""

KIND_MAP = 'map'
"""The field is a keyed map of :attr:`ValidationRules.array_item` values."""

PASSTHROUGH_TYPES = (UploadedFile, IOBase)

_INT_RE = re.compile(r'^[+-]?\d+$')
_FLOAT_RE = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
_TRUE_STRINGS = ('1', 'true', 'on', 'yes')
_FALSE_STRINGS = ('0', 'false', 'off', 'no', '')

_expanding = threading.local()


def is_schema_type(cls):
    """Tells whether ``cls`` carries its own schema, ie. whether its rule table
    can be nested into a parent's and whether values can be built with
    ``cls.from_data()``."""

    return is_class(cls) and getattr(cls, '__dto_schema__', False) is True


def is_backed_enum(cls):
    """An enum is usable when all its values are strings or all of them are
    integers, which is what allows building members back from raw data."""

    values = [m.value for m in cls]
    if len(values) == 0:
        return False

    if all(isinstance(v, str) for v in values):
        return True

    return all(isinstance(v, int) and not isinstance(v, bool) for v in values)


def get_object_kind(cls):
    if is_schema_type(cls):
        return KIND_SCHEMA
    if issubclass(cls, datetime.date):
        return KIND_TEMPORAL
    if issubclass(cls, PASSTHROUGH_TYPES):
        return KIND_PASSTHROUGH
    return KIND_PLAIN


def fix_required_with_prefix(rules, parent_key):
    """Rewrites the rules of a field nested under ``parent_key`` so that they
    only apply when the parent is present.

    >>> fix_required_with_prefix(['required', 'string'], 'address')
    ['required_with:address', 'string']
    >>> fix_required_with_prefix(['required_with:b'], 'a')
    ['required_with:a.b']
    """

    retval = []
    for rule in rules:
        if rule == 'required':
            rule = 'required_with:' + parent_key

        elif isinstance(rule, str) and rule.startswith('required_with:'):
            rule = 'required_with:%s.%s' % (parent_key,
                                              rule[len('required_with:'):])

        retval.append(rule)

    return retval


def _fmt_num(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _get_unique_key(rule):
    if isinstance(rule, str):
        return rule.split(':', 1)[0]

    if isinstance(rule, (types.FunctionType, types.MethodType,
                                 types.BuiltinFunctionType, functools.partial)):
        # every function is a distinct rule
        return rule

    if isinstance(rule, Directive) or callable(rule):
        return type(rule)

    raise ConfigurationError("Rules can only be strings, Directive instances "
                                         "or callables, not %r" % (rule,))


class CoercionContext(object):
    """Options that apply to a whole :meth:`BaseDTO.from_data` call, nested
    DTOs included. It's handed down explicitly instead of living in global
    state so that nested calls can't interfere with each other."""

    __slots__ = ('empty_string_as_null', 'cast_scalar_strings')

    def __init__(self, empty_string_as_null=True, cast_scalar_strings=True):
        self.empty_string_as_null = empty_string_as_null
        self.cast_scalar_strings = cast_scalar_strings

    @classmethod
    def from_config(cls):
        return cls(
            empty_string_as_null=config.get('dto.nullable_empty_string_as_null',
                                          DEFAULT_NULLABLE_EMPTY_STRING_AS_NULL),
            cast_scalar_strings=config.get('dto.cast_scalar_strings',
                                                    DEFAULT_CAST_SCALAR_STRINGS),
        )


class ValidationRules(object):
    """Describes how a DTO field is validated and built.

    :param rules: Additional rule directives, as a ``'|'``-delimited string or a
        list of strings, :class:`dtokit.integration.directive.Directive`
        instances or callables.
    :param required: The field must be present.
    :param nullable: The field accepts ``None``.
    :param string: The value is a string.
    :param boolean: The value is a boolean.
    :param integer: The value is an integer.
    :param numeric: The value is a number.
    :param enum: An :class:`enum.Enum` subclass whose values are accepted.
    :param enum_only: Only these members (or values) of ``enum`` are accepted.
    :param enum_except: These members (or values) of ``enum`` are refused.
    :param array: The value is a list or a dict.
    :param array_item: The type of the items of the array, either a class or
        another :class:`ValidationRules` instance.
    :param object: The class of the value. ``True`` means a keyed map whose
        values are described by ``array_item``.
    :param min: Minimum value. Minimum length or item count for strings and
        arrays.
    :param max: Maximum value. Maximum length or item count for strings and
        arrays.
    :param min_length: Minimum string length. Implies ``string``.
    :param max_length: Maximum string length. Implies ``string``.
    :param in_: The list of accepted values.
    :param shallow: When True, the rules of a nested DTO are not expanded into
        the parent's rule table. Only the rule of the field itself is kept.
    """

    def __init__(self, rules=None, required=None, nullable=None, string=None,
                 boolean=None, integer=None, numeric=None, enum=None,
                 enum_only=None, enum_except=None, array=None, array_item=None,
                 object=None, min=None, max=None, min_length=None,
                 max_length=None, in_=None, shallow=False):
        self.rules = rules
        self.required = required
        self.nullable = nullable
        self.string = string
        self.boolean = boolean
        self.integer = integer
        self.numeric = numeric
        self.enum = enum
        self.enum_only = enum_only
        self.enum_except = enum_except
        self.array = array
        self.array_item = array_item
        self.object = object
        self.min = min
        self.max = max
        self.min_length = min_length
        self.max_length = max_length
        self.in_ = in_
        self.shallow = shallow

        self.object_kind = None
        self._decimal = False
        self._build_plain = False
        self._inferred = False
        self._normalized = False
        self._parsed_rules = None

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, ', '.join(
            ['%s=%r' % (k, v) for k, v in self.__dict__.items()
                                    if v is not None and not k.startswith('_')
                                             and not (k == 'shallow' and not v)]
        ))

    def clone(self):
        """Returns a fresh copy that can be filled and normalized separately.
        Explicit descriptors are cloned before use because the same instance
        can be attached to several fields."""

        retval = copy.copy(self)
        retval.object_kind = None
        retval._normalized = False
        retval._parsed_rules = None
        return retval

    @property
    def is_scalar(self):
        return self.object is None and self.array_item is None

    def fill_with_field(self, field):
        """Fills the descriptor with what the declaration of ``field`` says.

        :param field: A :class:`dtokit.model._reader.FieldInfo` instance.
        """

        if field.is_value_required():
            self.required = True

        spec = field.type_spec
        if spec.nullable:
            self.nullable = True

        self.fill_with_type(spec.type)

    def fill_with_type(self, tp):
        if tp is None or tp is object:
            return

        if typing.get_origin(tp) is typing.Literal:
            if self.in_ is None:
                self.in_ = list(typing.get_args(tp))
            return

        category = scalar_category(tp)
        if category is not None:
            setattr(self, category, True)
            if issubclass(tp, decimal.Decimal):
                self._decimal = True

        elif is_class(tp):
            if issubclass(tp, enum.Enum):
                self.enum = tp
            else:
                self.object = tp

        if self.array and self.array_item is None:
            self._fill_array_item(tp)

    def _fill_array_item(self, tp):
        kind, item_type = get_collection_items(tp)
        if kind is None:
            return

        item = _parse_item_type(item_type)
        if item is None:
            return

        if kind == 'map':
            # a keyed map of values is an object, not a plain array
            self.array = None
            self.object = True

        self.array_item = item

    def normalize(self):
        """Checks the descriptor for consistency and folds implied settings.
        Only the first call does anything."""

        if self._normalized:
            return

        if self.enum is not None:
            if not (is_class(self.enum) and issubclass(self.enum, enum.Enum)):
                raise ConfigurationError("enum %r is not an Enum class"
                                                                 % (self.enum,))
            if not is_backed_enum(self.enum):
                # values can't be built back from data for such enums
                raise ConfigurationError("enum %r must have only str or only "
                                             "int values" % (self.enum,))

        if self.object is not None and self.object is not False:
            if self.object is True:
                self.object_kind = KIND_MAP

            elif not is_class(self.object):
                raise ConfigurationError("object type error: %r is not a class"
                                                               % (self.object,))
            else:
                self.object_kind = get_object_kind(self.object)

        if self.array_item is not None:
            if not (is_class(self.array_item)
                                or isinstance(self.array_item, ValidationRules)):
                raise ConfigurationError("array_item must be a class or a "
                                "ValidationRules instance, not %r" %
                                                           (self.array_item,))
            if isinstance(self.array_item, ValidationRules):
                self.array_item.normalize()

            self.array = True

        if self.min_length is not None or self.max_length is not None:
            self.string = True

        types_ = [t for t in PRIMITIVE_TYPES if getattr(self, t)]
        if len(types_) > 1:
            raise ConfigurationError("only one type can be set, got %s"
                                                           % ', '.join(types_))

        self._normalized = True

    def get_rules(self, key):
        """Returns the rule table of this field, keyed by ``key`` and the paths
        under it.

        >>> ValidationRules(required=True, string=True).get_rules('name')
        {'name': ['required', 'string']}
        """

        self.normalize()
        if self._parsed_rules is None:
            self._parsed_rules = self.parse_rules()

        retval = {}
        if len(self._parsed_rules) > 0:
            retval[key] = list(self._parsed_rules)

        if is_class(self.object):
            if self.object_kind == KIND_SCHEMA:
                if not self.shallow:
                    for k, v in _get_class_rules(self.object).items():
                        retval[key + '.' + k] = \
                                               fix_required_with_prefix(v, key)

            elif self.object_kind == KIND_PLAIN:
                for k, v in _get_class_rules(self.object, plain=True).items():
                    retval[key + '.' + k] = fix_required_with_prefix(v, key)

        item = self.array_item
        if is_class(item):
            # no required_with rewrite here, the wildcard already implies
            # "when present"
            if is_schema_type(item):
                if not self.shallow:
                    for k, v in _get_class_rules(item).items():
                        retval[key + '.*.' + k] = v

            elif get_object_kind(item) == KIND_PLAIN:
                for k, v in _get_class_rules(item, plain=True).items():
                    retval[key + '.*.' + k] = v

        elif isinstance(item, ValidationRules):
            if not (item._inferred and item.is_scalar and item.enum is None):
                retval.update(item.get_rules(key + '.*'))

        return retval

    def parse_rules(self):
        """Builds the ordered, deduplicated list of directives of this field
        alone."""

        self.normalize()

        rules_all = [
            'required' if self.required is True else None,
            'nullable' if self.nullable is True else None,

            'string' if self.string is True else None,
            'boolean' if self.boolean is True else None,
            'integer' if self.integer is True else None,
            'numeric' if self.numeric is True else None,
            'array' if self.array is True else None,
        ]

        if self.object_kind == KIND_TEMPORAL:
            rules_all.append('date')
        elif self.object_kind == KIND_SCHEMA:
            rules_all.append('array')

        rules_all.extend([
            'min:' + _fmt_num(self.min) if self.min is not None else None,
            'max:' + _fmt_num(self.max) if self.max is not None else None,
            'min:%d' % self.min_length if self.min_length is not None else None,
            'max:%d' % self.max_length if self.max_length is not None else None,
        ])

        if self.enum is not None:
            rules_all.append(EnumRule(self.enum, only=self.enum_only,
                                                       except_=self.enum_except))

        if self.in_:
            rules_all.append(InRule(self.in_))

        extra = self.rules
        if extra is None:
            extra = []
        elif isinstance(extra, str):
            extra = [r for r in extra.split('|') if r]
        elif not isinstance(extra, (list, tuple)):
            extra = [extra]
        rules_all.extend(extra)

        seen = {}
        for rule in rules_all:
            if rule is None:
                continue

            key = _get_unique_key(rule)
            if key in seen:
                continue

            seen[key] = rule

        retval = list(seen.values())

        if 'bail' in retval:
            retval.remove('bail')
            retval.insert(0, 'bail')

        return retval

    def make_value_from_raw_type(self, value, context=None):
        """Turns a raw value into a value of the type this descriptor
        describes. Raises :class:`dtokit.error.CoercionError` when that's
        impossible."""

        self.normalize()
        if context is None:
            context = CoercionContext.from_config()

        if self.nullable and (value is None or
                              (context.empty_string_as_null and value == '')):
            return None

        if self.enum is not None:
            return self._make_enum(value, context)

        if is_class(self.object):
            return self._make_object(value, context)

        if self.array_item is not None:
            return self._make_array(value, context)

        if self._decimal:
            return self._make_decimal(value)

        if context.cast_scalar_strings and isinstance(value, str):
            return self._cast_scalar(value)

        return value

    def _make_enum(self, value, context):
        enum_cls = self.enum
        if isinstance(value, enum_cls):
            return value

        if not isinstance(value, (str, int)) or isinstance(value, bool):
            raise CoercionError(enum_cls.__name__, "cant make enum because "
                            "value not string or int: %s" % enum_cls.__name__)

        if context.cast_scalar_strings and isinstance(value, str) \
                                                  and _INT_RE.match(value) \
                             and isinstance(next(iter(enum_cls)).value, int):
            value = int(value)

        try:
            return enum_cls(value)
        except ValueError as e:
            raise CoercionError(enum_cls.__name__, "%r is not a valid %s" %
                                               (value, enum_cls.__name__)) from e

    def _make_object(self, value, context):
        cls = self.object
        kind = self.object_kind

        if kind == KIND_SCHEMA:
            if isinstance(value, cls):
                return value

            if not isinstance(value, dict):
                raise CoercionError(cls.__name__, "cant make object because "
                                          "value not dict: %s" % cls.__name__)

            # don't make an empty DTO for a field that can just be None
            if len(value) == 0 and self.nullable:
                return None

            # validation already ran with the rules of the parent
            return cls.from_data(value, validate=False, context=context)

        if kind == KIND_TEMPORAL:
            try:
                return make_temporal(cls, value)
            except (TypeError, ValueError) as e:
                raise CoercionError(cls.__name__, "cant make %s out of %r" %
                                                  (cls.__name__, value)) from e

        if kind == KIND_PASSTHROUGH:
            return value

        if kind == KIND_PLAIN and self._build_plain:
            return _make_instance(cls, value, context)

        raise CoercionError(cls.__name__, "cant make object because type not "
                                                 "support: %s" % cls.__name__)

    def _make_array(self, value, context):
        item = self.array_item
        if isinstance(item, ValidationRules):
            name = 'ValidationRules'
            make = lambda v: item.make_value_from_raw_type(v, context)
        else:
            name = item.__name__
            make = lambda v: _make_instance(item, v, context)

        if isinstance(value, dict):
            return dict((k, make(v)) for k, v in value.items())

        if isinstance(value, (list, tuple)):
            return [make(v) for v in value]

        raise CoercionError(name, "cant make array_item because value not "
                                                            "array: %s" % name)

    def _make_decimal(self, value):
        if isinstance(value, decimal.Decimal) or isinstance(value, bool):
            return value

        if isinstance(value, int):
            return decimal.Decimal(value)

        if isinstance(value, float):
            # repr() is the shortest string that reads back as the same float
            return decimal.Decimal(repr(value))

        if isinstance(value, str) and _FLOAT_RE.match(value.strip()):
            return decimal.Decimal(value.strip())

        return value

    def _cast_scalar(self, value):
        if self.integer:
            if _INT_RE.match(value.strip()):
                return int(value)

        elif self.numeric:
            if _FLOAT_RE.match(value.strip()):
                return float(value)

        elif self.boolean:
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False

        return value


def _parse_item_type(tp):
    """Turns the item type of a collection annotation into what
    :attr:`ValidationRules.array_item` holds: the class itself for DTOs and
    plain classes, a descriptor for everything else."""

    spec = describe(tp)
    explicit = None
    for m in spec.metadata:
        if isinstance(m, ValidationRules):
            explicit = m.clone()
            break

    if not spec.declared or spec.type is None:
        return explicit

    item_type = spec.type
    category = scalar_category(item_type)
    if explicit is None and category is None and is_class(item_type) \
                                   and not issubclass(item_type, enum.Enum) \
               and get_object_kind(item_type) in (KIND_SCHEMA, KIND_PLAIN):
        if not spec.nullable:
            return item_type

        # the rules of the class only apply to the items that are not None
        retval = ValidationRules(object=item_type, nullable=True)
        retval._build_plain = True
        return retval

    retval = explicit
    if retval is None:
        retval = ValidationRules()
        retval._inferred = True

    if spec.nullable:
        retval.nullable = True

    retval.fill_with_type(item_type)

    return retval


def _get_class_rules(cls, plain=False):
    stack = getattr(_expanding, 'stack', None)
    if stack is None:
        stack = _expanding.stack = []

    if cls in stack:
        logger.debug("%r refers to itself, not expanding its rules again", cls)
        return {}

    stack.append(cls)
    try:
        if plain:
            from dtokit.model._reader import get_reader
            return get_reader(cls).get_properties_validation_rules()

        return cls.get_validation_rules()

    finally:
        stack.pop()


def _make_instance(cls, value, context):
    if isinstance(value, cls):
        return value

    if not isinstance(value, dict):
        raise CoercionError(cls.__name__, "cant make %s because value not "
                                                   "dict: %r" % (cls.__name__, value))

    from dtokit.model._reader import get_reader
    return get_reader(cls).new_instance_by_data(value, context)
