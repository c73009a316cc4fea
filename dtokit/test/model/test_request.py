#!/usr/bin/env python
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

import io
import json
import unittest

from typing import Optional, Annotated

from dtokit import config
from dtokit.error import ValidationError, ConfigurationError
from dtokit.integration.request import RequestInterface, WsgiRequest, \
    RequestPropertyInEnum
from dtokit.integration.validation import Validation
from dtokit.model import BaseRequestDTO, RequestPropertyInQuery, \
    RequestPropertyInPath, RequestPropertyInHeader, RequestPropertyInCookie, \
    RequestPropertyInBody, RequestPropertyInJson


def _environ(method='GET', qs='', body=b'', content_type=None, **kwargs):
    retval = {
        'REQUEST_METHOD': method,
        'QUERY_STRING': qs,
        'CONTENT_LENGTH': str(len(body)),
        'wsgi.input': io.BytesIO(body),
    }
    if content_type is not None:
        retval['CONTENT_TYPE'] = content_type
    retval.update(kwargs)
    return retval


class SearchDTO(BaseRequestDTO):
    q: str
    page: int = 1
    article_id: Annotated[int, RequestPropertyInPath('id')]
    token: Annotated[Optional[str], RequestPropertyInHeader('X-Token')] = None
    session: Annotated[Optional[str], RequestPropertyInCookie()] = None


class CreateDTO(BaseRequestDTO):
    title: str
    tags: list[str] = []


class MixedDTO(BaseRequestDTO):
    name: str
    source: Annotated[Optional[str], RequestPropertyInQuery()] = None


class RawDTO(BaseRequestDTO):
    raw: Annotated[str, RequestPropertyInBody()]


class JsonFieldDTO(BaseRequestDTO):
    name: Annotated[str, RequestPropertyInJson('full_name')]


class DictRequest(RequestInterface):
    def __init__(self, query):
        self.query = query

    def get_method(self):
        return 'GET'

    def get_content_type(self):
        return ''

    def get(self, key):
        return self.query.get(key)

    def all_get(self):
        return self.query


class _RequestTestBase(unittest.TestCase):
    def setUp(self):
        config.set_for_test()
        Validation.reset()

    def tearDown(self):
        config.set_for_test()
        Validation.reset()


class FromRequestTest(_RequestTestBase):
    def test_get(self):
        environ = _environ(qs='q=hello+world&page=2&token=ignored',
                           HTTP_X_TOKEN='secret',
                           HTTP_COOKIE='session=abc; other=1')
        environ['wsgiorg.routing_args'] = ((), {'id': '42'})

        dto = SearchDTO.from_request(environ)

        self.assertEqual(dto.q, 'hello world')
        self.assertEqual(dto.page, 2)
        self.assertEqual(dto.article_id, 42)
        self.assertEqual(dto.token, 'secret')
        self.assertEqual(dto.session, 'abc')

    def test_marked_field_ignores_default_source(self):
        environ = _environ(qs='q=x&token=from-query')
        environ['wsgiorg.routing_args'] = ((), {'id': '1'})

        self.assertIsNone(SearchDTO.from_request(environ).token)

    def test_missing_path_param(self):
        with self.assertRaises(ValidationError) as cm:
            SearchDTO.from_request(_environ(qs='q=x'))

        self.assertEqual(list(cm.exception.errors), ['article_id'])

    def test_json(self):
        body = json.dumps({'title': 'T', 'tags': ['a', 'b']}).encode('utf8')
        dto = CreateDTO.from_request(_environ('POST', body=body,
                              content_type='application/json; charset=utf-8'))

        self.assertEqual(dto.title, 'T')
        self.assertEqual(dto.tags, ['a', 'b'])

    def test_form(self):
        dto = CreateDTO.from_request(_environ('POST',
                           body=b'title=T&tags[]=a&tags[]=b',
                           content_type='application/x-www-form-urlencoded'))

        self.assertEqual(dto.title, 'T')
        self.assertEqual(dto.tags, ['a', 'b'])

    def test_unknown_content_type(self):
        self.assertRaises(ValidationError, CreateDTO.from_request,
                  _environ('POST', body=b'title=T', content_type='text/plain'))

    def test_explicit_default_in(self):
        environ = _environ('POST', qs='title=Q', body=b'{"title": "J"}',
                                               content_type='application/json')

        self.assertEqual(CreateDTO.from_request(environ).title, 'J')
        self.assertEqual(CreateDTO.from_request(environ,
                                          default_in=RequestPropertyInEnum.QUERY)
                                                                   .title, 'Q')
        self.assertEqual(CreateDTO.from_request(environ, default_in='query')
                                                                   .title, 'Q')

    def test_mixed_sources(self):
        dto = MixedDTO.from_request(_environ('POST', qs='source=web',
                                              body=b'{"name": "n"}',
                                              content_type='application/json'))
        self.assertEqual((dto.name, dto.source), ('n', 'web'))

    def test_body(self):
        dto = RawDTO.from_request(_environ('PUT', body=b'raw text',
                                                     content_type='text/plain'))
        self.assertEqual(dto.raw, 'raw text')

    def test_json_field_name(self):
        dto = JsonFieldDTO.from_request(_environ('POST',
                                     body=b'{"full_name": "Jane", "name": "x"}',
                                     content_type='application/json'))
        self.assertEqual(dto.name, 'Jane')

    def test_request_from_data_config(self):
        config.set_for_test('dto.from_data_config.request', {'trim': True})

        dto = CreateDTO.from_request(_environ(qs='title=+T+'))
        self.assertEqual(dto.title, 'T')

    def test_request_interface_instance(self):
        dto = CreateDTO.from_request(DictRequest({'title': 'T'}))
        self.assertEqual(dto.title, 'T')

    def test_request_class(self):
        config.set_for_test('dto.request_class', DictRequest)

        dto = CreateDTO.from_request({'title': 'T'})
        self.assertEqual(dto.title, 'T')

    def test_bad_request_class(self):
        config.set_for_test('dto.request_class', dict)
        self.assertRaises(ConfigurationError, CreateDTO.from_request,
                                                                {'title': 'T'})

    def test_no_request_class(self):
        self.assertRaises(ConfigurationError, CreateDTO.from_request, object())


if __name__ == '__main__':
    unittest.main()
