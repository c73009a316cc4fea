
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

"""The ``dtokit.integration.request`` module contains the request interface
that :meth:`dtokit.model.request.BaseRequestDTO.from_request` reads from,
along with an implementation that works on WSGI environ dicts.

Set ``dto.request_class`` to a :class:`RequestInterface` subclass or to a
callable that takes the framework's request object and returns a
:class:`RequestInterface` instance to read from another framework.
"""

import logging
logger = logging.getLogger(__name__)

import json

from enum import Enum
from collections import OrderedDict
from http.cookies import SimpleCookie
from urllib.parse import unquote

from dtokit import config
from dtokit.error import ConfigurationError


class RequestInterface(object):
    """What DTOs need to know about a request."""

    def get_method(self):
        """Returns the upper-case request method."""
        raise NotImplementedError()

    def get_content_type(self):
        """Returns the lower-case content type, or an empty string."""
        raise NotImplementedError()

    def get(self, key):
        """Returns a query string value, or None."""
        raise NotImplementedError()

    def path(self, key):
        """Returns a path parameter, or None."""
        raise NotImplementedError()

    def header(self, key):
        """Returns a header value, or None. Lookup is case-insensitive."""
        raise NotImplementedError()

    def cookie(self, name):
        raise NotImplementedError()

    def raw_body(self):
        """Returns the request body as ``str``."""
        raise NotImplementedError()

    def post_form(self, key):
        raise NotImplementedError()

    def post_json(self, key):
        raise NotImplementedError()

    def all_get(self):
        raise NotImplementedError()

    def all_post_form(self):
        raise NotImplementedError()

    def all_post_json(self):
        raise NotImplementedError()


def parse_qs(qs):
    """Parses a query string. Names that appear once map to their value, names
    that appear several times or end with ``[]`` map to lists.

    >>> parse_qs('a=1&b=2&b=3&c[]=4')
    OrderedDict([('a', '1'), ('b', ['2', '3']), ('c', ['4'])])
    """

    pairs = (s2 for s1 in qs.split('&') for s2 in s1.split(';'))
    lists = OrderedDict()
    forced = set()

    for name_value in pairs:
        if name_value is None or len(name_value) == 0:
            continue
        nv = name_value.split('=', 1)

        if len(nv) != 2:
            # Handle case of a control-name with no equal sign
            nv.append('')

        name = unquote(nv[0].replace('+', ' '))
        value = unquote(nv[1].replace('+', ' '))

        if name.endswith('[]'):
            name = name[:-2]
            forced.add(name)

        l = lists.get(name, None)
        if l is None:
            l = lists[name] = []
        l.append(value)

    retval = OrderedDict()
    for k, v in lists.items():
        if len(v) == 1 and not k in forced:
            retval[k] = v[0]
        else:
            retval[k] = v

    return retval


def _get_http_headers(environ):
    retval = {}

    for k, v in environ.items():
        if k.startswith("HTTP_"):
            retval[k[5:].replace('_', '-').lower()] = v

    for k in ('CONTENT_TYPE', 'CONTENT_LENGTH'):
        if environ.get(k):
            retval[k.replace('_', '-').lower()] = environ[k]

    return retval


class WsgiRequest(RequestInterface):
    """Reads a PEP-3333 environ dict.

    Path parameters are read from ``environ['wsgiorg.routing_args']``, which
    is where most WSGI routers put them.

    :param environ: The WSGI environ dict.
    :param max_content_length: Bodies longer than this are refused.
    """

    def __init__(self, environ, max_content_length=2 * 1024 * 1024):
        self.environ = environ
        self.max_content_length = max_content_length

        self._query = None
        self._headers = None
        self._cookies = None
        self._body = None
        self._form = None
        self._json = None

    def get_method(self):
        return self.environ.get('REQUEST_METHOD', 'GET').upper()

    def get_content_type(self):
        return self.environ.get('CONTENT_TYPE', '').lower()

    def get_charset(self):
        for part in self.get_content_type().split(';')[1:]:
            k, _, v = part.strip().partition('=')
            if k == 'charset' and v:
                return v.strip('"')
        return 'utf8'

    def all_get(self):
        if self._query is None:
            self._query = parse_qs(self.environ.get('QUERY_STRING', ''))
        return self._query

    def get(self, key):
        return self.all_get().get(key, None)

    def path(self, key):
        args = self.environ.get('wsgiorg.routing_args', None)
        if args is None:
            return None

        return args[1].get(key, None)

    def header(self, key):
        if self._headers is None:
            self._headers = _get_http_headers(self.environ)
        return self._headers.get(key.lower(), None)

    def cookie(self, name):
        if self._cookies is None:
            self._cookies = SimpleCookie()
            cookie_string = self.environ.get('HTTP_COOKIE', None)
            if cookie_string is not None:
                self._cookies.load(cookie_string)

        morsel = self._cookies.get(name, None)
        if morsel is None:
            return None
        return morsel.value

    def raw_body(self):
        if self._body is None:
            length = str(self.environ.get('CONTENT_LENGTH', '') or '')
            if len(length) == 0:
                length = 0
            else:
                length = int(length)

            if length > self.max_content_length:
                raise ValueError("Request body too long: %d bytes" % length)

            istream = self.environ.get('wsgi.input', None)
            data = b''
            if istream is not None and length > 0:
                data = istream.read(length)

            self._body = data.decode(self.get_charset())

        return self._body

    def all_post_form(self):
        if self._form is None:
            if 'application/x-www-form-urlencoded' in self.get_content_type():
                self._form = parse_qs(self.raw_body())
            else:
                self._form = OrderedDict()
        return self._form

    def post_form(self, key):
        return self.all_post_form().get(key, None)

    def all_post_json(self):
        if self._json is None:
            body = self.raw_body()
            retval = {}
            if len(body.strip()) > 0:
                retval = json.loads(body)

            if not isinstance(retval, dict):
                logger.warning("JSON body is not an object, ignored")
                retval = {}

            self._json = retval

        return self._json

    def post_json(self, key):
        return self.all_post_json().get(key, None)


class RequestPropertyInEnum(Enum):
    """Where in the request a value can come from."""

    QUERY = 'query'
    PATH = 'path'
    HEADER = 'header'
    COOKIE = 'cookie'
    BODY = 'body'
    FORM = 'form'
    JSON = 'json'

    @classmethod
    def try_from_request(cls, request):
        """Guesses where the values are: the query string for GET-like
        requests, otherwise the body, according to its content type. Returns
        None when the body isn't json or url-encoded."""

        if request.get_method() in ('GET', 'OPTIONS', 'HEAD'):
            return cls.QUERY

        content_type = request.get_content_type()
        if 'application/json' in content_type:
            return cls.JSON
        if 'application/x-www-form-urlencoded' in content_type:
            return cls.FORM

        return None

    def get_from_request(self, request, name):
        if self is RequestPropertyInEnum.QUERY:
            return request.get(name)
        if self is RequestPropertyInEnum.PATH:
            return request.path(name)
        if self is RequestPropertyInEnum.HEADER:
            return request.header(name)
        if self is RequestPropertyInEnum.COOKIE:
            return request.cookie(name)
        if self is RequestPropertyInEnum.BODY:
            return request.raw_body()
        if self is RequestPropertyInEnum.FORM:
            return request.post_form(name)
        return request.post_json(name)

    def get_all_from_request(self, request):
        if self is RequestPropertyInEnum.QUERY:
            return request.all_get()
        if self is RequestPropertyInEnum.JSON:
            return request.all_post_json()
        if self is RequestPropertyInEnum.FORM:
            return request.all_post_form()

        raise ValueError("Can't get all values from %s" % self.value)


class Request(object):
    @classmethod
    def from_(cls, request):
        """Wraps ``request`` with the :class:`RequestInterface` implementation
        configured with ``dto.request_class``."""

        if isinstance(request, RequestInterface):
            return request

        factory = config.get('dto.request_class')
        if factory is None:
            if isinstance(request, dict):
                return WsgiRequest(request)
            raise ConfigurationError("Can't read %r, set dto.request_class"
                                                                 % (request,))

        retval = factory(request)
        if not isinstance(retval, RequestInterface):
            raise ConfigurationError("request_class error: %r returned %r"
                                                          % (factory, retval))
        return retval
