
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

"""The ``dtokit.integration.response`` module contains the response factory
that :meth:`dtokit.model.response.BaseResponseDTO.to_response` uses.

The default factory returns :class:`JsonResponse` instances, which are WSGI
applications. Set ``dto.response_factory`` to a :class:`ResponseInterface`
subclass, an instance or a callable that returns an instance to produce the
response objects of another framework.
"""

import logging
logger = logging.getLogger(__name__)

import json
import threading

from http.client import responses

from dtokit import config
from dtokit.error import ConfigurationError


class ResponseInterface(object):
    def json(self, data, status=200, headers=None, status_text=None):
        """Returns a response whose body is ``data`` as json."""

        raise NotImplementedError()


class JsonResponse(object):
    """A json response that can be served by any WSGI server. ::

        def application(environ, start_response):
            return dto.to_response()(environ, start_response)
    """

    def __init__(self, body, status=200, headers=None, status_text=None):
        self.body = body
        self.status = status
        self.status_text = status_text or responses.get(status, 'Unknown')
        self.headers = dict(headers or {})

    def __repr__(self):
        return "JsonResponse(%d %s, %r)" % (self.status, self.status_text,
                                                                     self.body)

    @property
    def status_line(self):
        return "%d %s" % (self.status, self.status_text)

    def __call__(self, environ, start_response):
        headers = dict(self.headers)
        headers['Content-Length'] = str(len(self.body))

        start_response(self.status_line, list(headers.items()))
        return [self.body]


class JsonResponseFactory(ResponseInterface):
    def json(self, data, status=200, headers=None, status_text=None):
        retval_headers = {'Content-Type': 'application/json'}
        if headers:
            retval_headers.update(headers)

        body = json.dumps(data, ensure_ascii=False).encode('utf8')
        return JsonResponse(body, status, retval_headers, status_text)


class Response(object):
    _instance = None
    _lock = threading.Lock()

    @classmethod
    def create(cls):
        """Returns the process-wide response factory."""

        if cls._instance is None:
            instance = cls._make()
            with cls._lock:
                if cls._instance is None:
                    cls._instance = instance

        return cls._instance

    @classmethod
    def reset(cls):
        with cls._lock:
            cls._instance = None

    @classmethod
    def _make(cls):
        factory = config.get('dto.response_factory')
        if factory is None:
            return JsonResponseFactory()

        if isinstance(factory, ResponseInterface):
            return factory

        if isinstance(factory, type):
            if not issubclass(factory, ResponseInterface):
                raise ConfigurationError("response_factory error: %r is not a "
                                            "ResponseInterface subclass" % factory)
            return factory()

        if callable(factory):
            retval = factory()
            if not isinstance(retval, ResponseInterface):
                raise ConfigurationError("response_factory error: %r returned "
                                                                 "%r" % (factory, retval))
            return retval

        raise ConfigurationError("response_factory error: %r" % (factory,))
