
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

"""The ``dtokit.model.request`` module contains :class:`BaseRequestDTO`, the
base class of DTOs that are built out of HTTP requests. ::

    class SearchDTO(BaseRequestDTO):
        q: str
        page: int = 1
        token: Annotated[str, RequestPropertyInHeader('X-Token')]

    def application(environ, start_response):
        dto = SearchDTO.from_request(environ)
"""

import logging
logger = logging.getLogger(__name__)

from dtokit.integration.request import Request, RequestPropertyInEnum
from dtokit.model.attrs import FromDataConfig
from dtokit.model.dto import BaseDTO
from dtokit.model._reader import get_reader


class BaseRequestDTO(BaseDTO):
    @classmethod
    def get_default_from_data_config(cls):
        return FromDataConfig.create_for_request_dto()

    @classmethod
    def from_request(cls, request=None, default_in=None, validate=True):
        """Builds an instance out of the values in ``request``.

        :param request: A :class:`dtokit.integration.request.RequestInterface`
            instance, a WSGI environ dict or whatever ``dto.request_class``
            accepts.
        :param default_in: Where the values of fields without a
            :class:`dtokit.model.attrs.RequestPropertyIn` marker come from. A
            :class:`dtokit.integration.request.RequestPropertyInEnum` member or
            value. Guessed from the request method and content type when None.
        :param validate: Whether to validate the values.
        """

        request = Request.from_(request)
        data = cls.get_data_from_request(request, default_in)

        return cls.from_data(data, validate=validate)

    @classmethod
    def get_data_from_request(cls, request, default_in=None):
        if default_in is None:
            default_in = RequestPropertyInEnum.try_from_request(request)
        elif not isinstance(default_in, RequestPropertyInEnum):
            default_in = RequestPropertyInEnum(default_in)

        data = {}
        if default_in is not None:
            data.update(default_in.get_all_from_request(request))
        else:
            logger.debug("%s: no default source for %s request", cls.__name__,
                                                          request.get_method())

        for name, marker in get_reader(cls).get_request_property_in_list() \
                                                                      .items():
            # a marked field only ever reads from its own source
            data.pop(name, None)

            value = marker.get_in_enum().get_from_request(request,
                                                           marker.name or name)
            if value is not None:
                data[name] = value

        return data
