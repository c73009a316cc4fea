
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

"""The ``dtokit.model.attrs`` module contains the markers that are attached to
DTO classes and fields.

Class-level configuration is set with class attributes: ::

    class ArticleDTO(BaseDTO):
        __from_data_config__ = FromDataConfig(trim=True)
        __to_array_config__ = ToArrayConfig(exclude=['secret'])

Field-level markers go inside ``typing.Annotated``: ::

    class SearchDTO(BaseRequestDTO):
        token: Annotated[str, RequestPropertyInHeader('X-Token')]
"""

import logging
logger = logging.getLogger(__name__)

from dtokit import config
from dtokit.const import DEFAULT_FROM_DATA_CONFIG


class FromDataConfig(object):
    """Pre-processing options of :meth:`dtokit.model.dto.BaseDTO.from_data`.

    :param ignore_null: Drop keys whose value is ``None``.
    :param ignore_empty: Drop keys whose value is an empty string.
    :param trim: Strip whitespace around string values.
    :param validate_properties_all_with_bail: Put ``bail`` in front of the
        rules of every field so only the first failure of a field is reported.
    """

    __slots__ = ('ignore_null', 'ignore_empty', 'trim',
                                           'validate_properties_all_with_bail')

    def __init__(self, ignore_null=False, ignore_empty=False, trim=False,
                                      validate_properties_all_with_bail=False):
        self.ignore_null = ignore_null
        self.ignore_empty = ignore_empty
        self.trim = trim
        self.validate_properties_all_with_bail = \
                                               validate_properties_all_with_bail

    def __repr__(self):
        return "FromDataConfig(%s)" % ', '.join(
                   ['%s=%r' % (k, getattr(self, k)) for k in self.__slots__])

    def __eq__(self, other):
        return isinstance(other, FromDataConfig) and all(
             [getattr(self, k) == getattr(other, k) for k in self.__slots__])

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None

    @classmethod
    def from_dict(cls, d):
        values = dict(DEFAULT_FROM_DATA_CONFIG)
        for k, v in (d or {}).items():
            if k in values:
                values[k] = v
            else:
                logger.warning("Ignoring unknown FromDataConfig key %r", k)

        return cls(**values)

    @classmethod
    def create_for_base_dto(cls):
        return cls.from_dict(config.get('dto.from_data_config.base', {}))

    @classmethod
    def create_for_request_dto(cls):
        return cls.from_dict(config.get('dto.from_data_config.request', {}))


class ToArrayConfig(object):
    """Options of :meth:`dtokit.model.dto.BaseDTO.to_array`.

    :param only: When given, only these fields are serialized.
    :param include: Names of non-field attributes (like properties) to add.
    :param exclude: Fields to leave out.
    :param ignore_null: Leave out fields whose value is ``None``. ``None``
        means ``dto.to_array_config.ignore_null`` decides.
    :param empty_array_as_object: ``True`` to serialize every empty list as an
        empty dict, or a list of field names to do that only for them. ``None``
        means ``dto.to_array_config.empty_array_as_object`` decides.
    :param single_key: Serialize only the value of this field, without the
        surrounding dict.
    """

    __slots__ = ('only', 'include', 'exclude', 'ignore_null',
                                          'empty_array_as_object', 'single_key')

    def __init__(self, only=None, include=None, exclude=None, ignore_null=None,
                                      empty_array_as_object=None, single_key=None):
        self.only = only
        self.include = include
        self.exclude = exclude
        self.ignore_null = ignore_null
        self.empty_array_as_object = empty_array_as_object
        self.single_key = single_key

    def __repr__(self):
        return "ToArrayConfig(%s)" % ', '.join(
                   ['%s=%r' % (k, getattr(self, k)) for k in self.__slots__
                                                 if getattr(self, k) is not None])

    def get_ignore_null(self):
        if self.ignore_null is not None:
            return self.ignore_null
        return bool(config.get('dto.to_array_config.ignore_null', False))

    def is_empty_array_as_object(self, name):
        value = self.empty_array_as_object
        if value is None:
            value = config.get('dto.to_array_config.empty_array_as_object',
                                                                          False)

        if value is True:
            return True
        if isinstance(value, (list, tuple, set, frozenset)):
            return name in value
        return False


class RequestPropertyIn(object):
    """Says where in the request the value of a field comes from.

    :param in_: One of the :class:`dtokit.integration.request.RequestPropertyInEnum`
        values.
    :param name: The name of the value in the request. Defaults to the name of
        the field.
    """

    IN = None

    def __init__(self, in_=None, name=None):
        if in_ is None:
            in_ = self.IN
        self.in_ = in_
        self.name = name

    def __repr__(self):
        return "%s(%r, name=%r)" % (self.__class__.__name__, self.in_,
                                                                     self.name)

    def get_in_enum(self):
        from dtokit.integration.request import RequestPropertyInEnum
        return RequestPropertyInEnum(self.in_)


class RequestPropertyInQuery(RequestPropertyIn):
    IN = 'query'

    def __init__(self, name=None):
        super(RequestPropertyInQuery, self).__init__(name=name)


class RequestPropertyInPath(RequestPropertyIn):
    IN = 'path'

    def __init__(self, name=None):
        super(RequestPropertyInPath, self).__init__(name=name)


class RequestPropertyInHeader(RequestPropertyIn):
    IN = 'header'

    def __init__(self, name=None):
        super(RequestPropertyInHeader, self).__init__(name=name)


class RequestPropertyInCookie(RequestPropertyIn):
    IN = 'cookie'

    def __init__(self, name=None):
        super(RequestPropertyInCookie, self).__init__(name=name)


class RequestPropertyInBody(RequestPropertyIn):
    """The field gets the whole raw request body."""

    IN = 'body'

    def __init__(self, name=None):
        super(RequestPropertyInBody, self).__init__(name=name)


class RequestPropertyInForm(RequestPropertyIn):
    IN = 'form'

    def __init__(self, name=None):
        super(RequestPropertyInForm, self).__init__(name=name)


class RequestPropertyInJson(RequestPropertyIn):
    IN = 'json'

    def __init__(self, name=None):
        super(RequestPropertyInJson, self).__init__(name=name)


class ResponsePropertyInHeader(RequestPropertyIn):
    """The field is sent as a response header instead of being part of the
    response body."""

    IN = 'header'

    def __init__(self, name=None):
        super(ResponsePropertyInHeader, self).__init__(name=name)
