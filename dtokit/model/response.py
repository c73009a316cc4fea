
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

"""The ``dtokit.model.response`` module contains :class:`BaseResponseDTO`, the
base class of DTOs that are sent back as HTTP responses."""

import logging
logger = logging.getLogger(__name__)

from dtokit import config
from dtokit.const import DEFAULT_RESPONSE_FORMAT
from dtokit.error import ConfigurationError
from dtokit.integration.response import Response
from dtokit.model.dto import BaseDTO
from dtokit.model._reader import get_reader


class BaseResponseDTO(BaseDTO):
    _response_status = 200
    _response_status_text = None
    _response_headers = None

    def with_response_status(self, status, text=None):
        self._response_status = status
        self._response_status_text = text
        return self

    def with_response_status_text(self, text):
        self._response_status_text = text
        return self

    def with_response_headers(self, headers):
        self._response_headers = dict(headers)
        return self

    def get_response_status(self):
        return self._response_status

    def get_response_status_text(self):
        return self._response_status_text

    def get_response_headers(self):
        """Returns the headers set with :meth:`with_response_headers` merged
        with the values of the fields marked with
        :class:`dtokit.model.attrs.ResponsePropertyInHeader`."""

        retval = dict(self._response_headers or {})
        for name, marker in get_reader(self.__class__) \
                                             .get_response_header_list().items():
            value = getattr(self, name, None)
            if value is not None:
                retval[marker.name or name] = str(value)

        return retval

    def get_response_body(self):
        """Returns the serialized DTO without the fields that are sent as
        headers."""

        retval = self.to_array()
        if isinstance(retval, dict):
            for name in get_reader(self.__class__).get_response_header_list():
                retval.pop(name, None)

            if len(retval) == 0:
                retval = {}

        elif isinstance(retval, list) and len(retval) == 0:
            # an empty body is an empty object for json consumers
            retval = {}

        return retval

    def to_response(self):
        """Returns the response according to ``dto.to_response_format``."""

        fmt = config.get('dto.to_response_format', DEFAULT_RESPONSE_FORMAT)

        if fmt == 'json':
            return Response.create().json(self.get_response_body(),
                                    status=self.get_response_status(),
                                    headers=self.get_response_headers(),
                                    status_text=self.get_response_status_text())

        if callable(fmt):
            return fmt(self)

        raise ConfigurationError("to_response_format error: %r" % (fmt,))
