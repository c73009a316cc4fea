
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

"""The ``dtokit.model.dto`` module contains :class:`BaseDTO`, the base class
of every data transfer object.

A DTO declares its fields as class annotations: ::

    class AddressDTO(BaseDTO):
        city: str
        zip: Optional[str] = None

    class UserDTO(BaseDTO):
        name: Annotated[str, ValidationRules(max_length=64)]
        status: Status
        address: Optional[AddressDTO] = None
        tags: list[str] = []

The field declarations are turned into a rule table once per class. Input is
validated against the whole rule table, nested DTOs included, and then turned
into instances without further validation.
"""

import logging
logger = logging.getLogger(__name__)

import enum
import datetime

from dtokit import config as dtokit_config
from dtokit.const import DEFAULT_DATETIME_FORMAT
from dtokit.error import NewInstanceError, MissingArgumentError
from dtokit.integration.validation import Validation
from dtokit.model.attrs import FromDataConfig
from dtokit.model.rules import CoercionContext, is_schema_type
from dtokit.model._reader import get_reader
from dtokit.util.datetime import format_datetime


def _preprocess(data, from_data_config):
    retval = {}
    for k, v in data.items():
        v = _preprocess_value(v, from_data_config)

        if from_data_config.ignore_null and v is None:
            continue
        if from_data_config.ignore_empty and v == '':
            continue

        retval[k] = v

    return retval


def _preprocess_value(value, from_data_config):
    if isinstance(value, str):
        if from_data_config.trim:
            return value.strip()
        return value

    if isinstance(value, dict):
        return _preprocess(value, from_data_config)

    if isinstance(value, (list, tuple)):
        return [_preprocess_value(v, from_data_config) for v in value]

    return value


class BaseDTO(object):
    """Base class of data transfer objects."""

    __dto_schema__ = True

    __from_data_config__ = None
    """A :class:`dtokit.model.attrs.FromDataConfig` instance, or a dict with
    the same keys."""

    __to_array_config__ = None
    """A :class:`dtokit.model.attrs.ToArrayConfig` instance."""

    @classmethod
    def get_default_from_data_config(cls):
        return FromDataConfig.create_for_base_dto()

    @classmethod
    def get_from_data_config(cls, from_data_config=None):
        if from_data_config is not None:
            return from_data_config

        retval = get_reader(cls).get_from_data_config()
        if retval is None:
            retval = cls.get_default_from_data_config()
        return retval

    @classmethod
    def from_data(cls, data, validate=True, config=None, context=None):
        """Builds an instance out of a dict.

        :param data: The input dict.
        :param validate: Whether to validate ``data`` first. Nested DTOs are
            built with ``validate=False`` as the rules of the outermost DTO
            already cover them.
        :param config: A :class:`dtokit.model.attrs.FromDataConfig` that
            overrides the one of the class.
        :param context: A :class:`dtokit.model.rules.CoercionContext`. Created
            from configuration when None.
        """

        from_data_config = cls.get_from_data_config(config)
        if context is None:
            context = CoercionContext.from_config()

        data = _preprocess(data, from_data_config)

        if validate:
            data = cls.validate_data(data, from_data_config)

        try:
            return get_reader(cls).new_instance_by_data(data, context)

        except (NewInstanceError, MissingArgumentError) as e:
            logger.debug("new %s failed: %r", cls.__name__, e)
            raise NewInstanceError(cls.__name__) from e

    @classmethod
    def validate_data(cls, data, from_data_config=None):
        """Validates ``data`` against the rule table of the class. Returns the
        validated data, raises :class:`dtokit.error.ValidationError`."""

        rules = cls.get_validation_rules()
        if len(rules) == 0:
            return data

        if from_data_config is not None and \
                                from_data_config.validate_properties_all_with_bail:
            rules = dict([(k, ['bail'] + [r for r in v if r != 'bail'])
                                                       for k, v in rules.items()])

        return Validation.create().validate(data, rules,
                                         cls.get_validation_rule_messages(),
                                         cls.get_validation_rule_custom_attributes())

    @classmethod
    def get_validation_rules(cls):
        """Returns the rule table of the class: the rules of its fields along
        with what :meth:`get_extra_validation_rules` returns."""

        retval = get_reader(cls).get_properties_validation_rules()

        extra = cls.get_extra_validation_rules()
        if extra:
            retval.update(extra)

        return retval

    @classmethod
    def get_extra_validation_rules(cls):
        """Override this to add rules that can't be expressed on the fields."""

        return {}

    @classmethod
    def get_validation_rule_messages(cls):
        """Override this to customize error messages. Keys are either
        ``'field.rule'`` or ``'rule'``."""

        return {}

    @classmethod
    def get_validation_rule_custom_attributes(cls):
        """Override this to give fields human-readable names in messages."""

        return {}

    def get_to_array_include_properties(self):
        return []

    def get_to_array_exclude_properties(self):
        return []

    def to_array(self, config=None):
        """Serializes the instance to a dict of plain values.

        :param config: A :class:`dtokit.model.attrs.ToArrayConfig` that
            overrides the one of the class.
        """

        reader = get_reader(self.__class__)
        if config is None:
            config = reader.get_to_array_config()

        if config.single_key is not None:
            return _serialize(getattr(self, config.single_key, None))

        if config.only is not None:
            names = list(config.only)

        else:
            names = reader.get_property_names()
            for name in (config.include or []):
                if not name in names:
                    names.append(name)
            for name in self.get_to_array_include_properties():
                if not name in names:
                    names.append(name)

            exclude = set(config.exclude or [])
            exclude.update(self.get_to_array_exclude_properties())
            names = [n for n in names if not n in exclude]

        ignore_null = config.get_ignore_null()

        retval = {}
        for name in names:
            value = _serialize(getattr(self, name, None))

            if ignore_null and value is None:
                continue

            if isinstance(value, list) and len(value) == 0 \
                                      and config.is_empty_array_as_object(name):
                value = {}

            retval[name] = value

        return retval

    def __repr__(self):
        names = get_reader(self.__class__).get_property_names()
        return "%s(%s)" % (self.__class__.__name__, ', '.join(
                     ['%s=%r' % (k, getattr(self, k, None)) for k in names]))

    def __eq__(self, other):
        if other.__class__ is not self.__class__:
            return NotImplemented

        names = get_reader(self.__class__).get_property_names()
        return all([getattr(self, k, None) == getattr(other, k, None)
                                                              for k in names])

    __hash__ = object.__hash__


def _serialize(value):
    if is_schema_type(value.__class__) and hasattr(value, 'to_array'):
        return value.to_array()

    if isinstance(value, enum.Enum):
        return value.value

    if isinstance(value, (datetime.date, datetime.time)):
        fmt = dtokit_config.get('dto.to_array_config.datetime_format',
                                                        DEFAULT_DATETIME_FORMAT)
        return format_datetime(value, fmt)

    if isinstance(value, dict):
        return dict([(k, _serialize(v)) for k, v in value.items()])

    if isinstance(value, (list, tuple, set, frozenset)):
        return [_serialize(v) for v in value]

    return value
