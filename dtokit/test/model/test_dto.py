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

import enum
import datetime
import unittest
import dataclasses

from decimal import Decimal
from typing import Optional, Annotated

from dtokit import config
from dtokit.error import ConfigurationError, CoercionError, ValidationError, \
    NewInstanceError, MissingArgumentError
from dtokit.integration.validation import Validation
from dtokit.model import BaseDTO, ValidationRules, FromDataConfig, \
    ToArrayConfig


class Status(enum.Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'


class AddressDTO(BaseDTO):
    city: str
    zip: Optional[str] = None


class TagDTO(BaseDTO):
    label: str


class UserDTO(BaseDTO):
    name: Annotated[str, ValidationRules(max_length=10)]
    age: int
    status: Status
    address: Optional[AddressDTO] = None
    tags: list[TagDTO] = []
    nicknames: list[str] = []
    created: Optional[datetime.datetime] = None


class SimpleDTO(BaseDTO):
    name: str
    age: int
    ok: bool
    score: float
    tags: list[str] = []


class PointDTO(BaseDTO):
    x: int
    y: int

    def __init__(self, x, y=0):
        self.x = x
        self.y = y


class PosOnlyDTO(BaseDTO):
    a: int

    def __init__(self, a, /):
        self.a = a


class PosDefaultsDTO(BaseDTO):
    a: int
    b: int

    def __init__(self, a=1, b=2, /):
        self.a = a
        self.b = b


class PriceDTO(BaseDTO):
    price: Decimal
    discount: Optional[Decimal] = None


class Point(object):
    x: int


class RouteDTO(BaseDTO):
    stops: list[Optional[AddressDTO]] = []
    points: list[Optional[Point]] = []


@dataclasses.dataclass
class ItemDC(BaseDTO):
    name: str
    qty: int = 1
    tags: list = dataclasses.field(default_factory=list)


@dataclasses.dataclass(frozen=True)
class FrozenDC(BaseDTO):
    a: int
    b: int = dataclasses.field(init=False, default=0)


class ExplodingDTO(BaseDTO):
    a: int

    def __init__(self, a):
        raise RuntimeError("boom")


class TrimDTO(BaseDTO):
    __from_data_config__ = FromDataConfig(trim=True, ignore_empty=True)

    name: str
    note: Optional[str] = 'default'


class BailDTO(BaseDTO):
    code: Annotated[str, ValidationRules(min_length=3)]


class SignupDTO(BaseDTO):
    email: str
    password: str

    @classmethod
    def get_extra_validation_rules(cls):
        return {'email': ['required', 'email']}

    @classmethod
    def get_validation_rule_messages(cls):
        return {'email.email': 'Bad :attribute'}

    @classmethod
    def get_validation_rule_custom_attributes(cls):
        return {'email': 'e-mail address'}


class ProfileDTO(BaseDTO):
    __to_array_config__ = ToArrayConfig(exclude=['secret'], include=['display'])

    name: str
    secret: str
    bio: Optional[str] = None

    @property
    def display(self):
        return self.name.upper()


class PublicProfileDTO(ProfileDTO):
    __to_array_config__ = None

    def get_to_array_exclude_properties(self):
        return ['secret', 'bio']

    def get_to_array_include_properties(self):
        return ['display']


class BagDTO(BaseDTO):
    items: list = []
    extra: dict = {}
    other: list = []


class NoteDTO(BaseDTO):
    note: Optional[int] = None


class BadTypeDTO(BaseDTO):
    x: Annotated[int, ValidationRules(string=True)]


class _ConfigTestBase(unittest.TestCase):
    def setUp(self):
        config.set_for_test()
        Validation.reset()

    def tearDown(self):
        config.set_for_test()
        Validation.reset()


class FromDataTest(_ConfigTestBase):
    def test_full(self):
        user = UserDTO.from_data({
            'name': 'alice',
            'age': 30,
            'status': 'active',
            'address': {'city': 'Paris'},
            'tags': [{'label': 'a'}, {'label': 'b'}],
            'nicknames': ['al'],
            'created': '2024-01-02T03:04:05Z',
        })

        self.assertEqual(user.name, 'alice')
        self.assertEqual(user.age, 30)
        self.assertIs(user.status, Status.ACTIVE)
        self.assertIsInstance(user.address, AddressDTO)
        self.assertEqual(user.address.city, 'Paris')
        self.assertIsNone(user.address.zip)
        self.assertEqual([t.label for t in user.tags], ['a', 'b'])
        self.assertEqual(user.nicknames, ['al'])
        self.assertEqual(user.created.utcoffset(), datetime.timedelta(0))
        self.assertEqual(user.created.replace(tzinfo=None),
                                        datetime.datetime(2024, 1, 2, 3, 4, 5))

    def test_validation_error(self):
        with self.assertRaises(ValidationError) as cm:
            UserDTO.from_data({'name': 'x' * 11, 'status': 'bogus'})

        e = cm.exception
        self.assertEqual(e.first_errors(), {
            'name': 'The name field must not be greater than 10 characters.',
            'age': 'The age field is required.',
            'status': 'The selected status is invalid.',
        })
        self.assertEqual(e.first(),
                      'The name field must not be greater than 10 characters.')
        self.assertTrue(e.is_client_error)

    def test_nested_required_with(self):
        with self.assertRaises(ValidationError) as cm:
            UserDTO.from_data({'name': 'a', 'age': 1, 'status': 'active',
                                                      'address': {'zip': '1'}})

        self.assertEqual(list(cm.exception.errors), ['address.city'])

    def test_nested_empty_is_none(self):
        user = UserDTO.from_data({'name': 'a', 'age': 1, 'status': 'active',
                                                                 'address': {}})
        self.assertIsNone(user.address)

    def test_nested_instances_are_fresh(self):
        data = {'name': 'a', 'age': 1, 'status': 'active',
                                                  'address': {'city': 'Paris'}}
        u1 = UserDTO.from_data(data)
        u2 = UserDTO.from_data(data)
        self.assertIsNot(u1.address, u2.address)
        self.assertEqual(u1.address, u2.address)

    def test_coercion_error_is_wrapped(self):
        with self.assertRaises(NewInstanceError) as cm:
            UserDTO.from_data({'name': 'a', 'age': 1, 'status': 'bogus'},
                                                                validate=False)

        self.assertEqual(cm.exception.class_name, 'UserDTO')
        self.assertEqual(str(cm.exception), 'new UserDTO failed')
        self.assertIsInstance(cm.exception.__cause__, CoercionError)

    def test_configuration_error_is_not_wrapped(self):
        self.assertRaises(ConfigurationError, BadTypeDTO.from_data, {'x': 1})
        self.assertRaises(ConfigurationError, BadTypeDTO.from_data, {'x': 1},
                                                                 validate=False)

    def test_passthrough_round_trip(self):
        data = {'name': 'a', 'age': 1, 'ok': True, 'score': 1.5,
                                                             'tags': ['x', 'y']}
        dto = SimpleDTO.from_data(data)

        self.assertEqual(dto.name, 'a')
        self.assertEqual(dto.age, 1)
        self.assertIs(dto.ok, True)
        self.assertEqual(dto.score, 1.5)
        self.assertEqual(dto.to_array(), data)

    def test_string_casting(self):
        dto = SimpleDTO.from_data({'name': 'a', 'age': '7', 'ok': '1',
                                                                 'score': '2'})
        self.assertEqual(dto.age, 7)
        self.assertIs(dto.ok, True)
        self.assertEqual(dto.score, 2.0)

    def test_string_casting_disabled(self):
        config.set_for_test('dto.cast_scalar_strings', False)

        dto = NoteDTO.from_data({'note': '5'})
        self.assertEqual(dto.note, '5')

    def test_empty_string_as_null(self):
        self.assertIsNone(NoteDTO.from_data({'note': ''}).note)

        config.set_for_test('dto.nullable_empty_string_as_null', False)
        self.assertEqual(NoteDTO.from_data({'note': ''}).note, '')

    def test_extra_data_is_ignored(self):
        dto = NoteDTO.from_data({'note': 1, 'other': 2})
        self.assertFalse(hasattr(dto, 'other'))

    def test_decimal(self):
        dto = PriceDTO.from_data({'price': '19.99', 'discount': 0.1})
        self.assertIsInstance(dto.price, Decimal)
        self.assertEqual(dto.price, Decimal('19.99'))
        self.assertEqual(dto.discount, Decimal('0.1'))

        dto = PriceDTO.from_data({'price': 3})
        self.assertEqual(dto.price, Decimal(3))
        self.assertIsNone(dto.discount)

    def test_nullable_array_items(self):
        rules = RouteDTO.get_validation_rules()
        self.assertEqual(rules['stops.*'], ['nullable', 'array'])
        self.assertEqual(rules['stops.*.city'],
                                          ['required_with:stops.*', 'string'])
        self.assertEqual(rules['points.*'], ['nullable'])
        self.assertEqual(rules['points.*.x'],
                                        ['required_with:points.*', 'integer'])

        dto = RouteDTO.from_data({'stops': [None, {'city': 'x'}],
                                            'points': [{'x': '1'}, None]})
        self.assertIsNone(dto.stops[0])
        self.assertIsInstance(dto.stops[1], AddressDTO)
        self.assertEqual(dto.stops[1].city, 'x')
        self.assertIsInstance(dto.points[0], Point)
        self.assertEqual(dto.points[0].x, 1)
        self.assertIsNone(dto.points[1])

        with self.assertRaises(ValidationError) as cm:
            RouteDTO.from_data({'stops': [None, {'zip': '1'}]})
        self.assertEqual(list(cm.exception.errors), ['stops.1.city'])


class ConstructorTest(_ConfigTestBase):
    def test_constructor(self):
        p = PointDTO.from_data({'x': '3'})
        self.assertEqual((p.x, p.y), (3, 0))

    def test_missing_argument(self):
        with self.assertRaises(NewInstanceError) as cm:
            PointDTO.from_data({}, validate=False)

        cause = cm.exception.__cause__
        self.assertIsInstance(cause, MissingArgumentError)
        self.assertEqual(cause.argument, 'x')
        self.assertEqual(str(cause),
                             'class PointDTO construct parameter x is missing')

    def test_positional_only(self):
        self.assertEqual(PosOnlyDTO.from_data({'a': 5}).a, 5)

        dto = PosDefaultsDTO.from_data({'b': 5})
        self.assertEqual((dto.a, dto.b), (1, 5))

    def test_dataclass(self):
        item = ItemDC.from_data({'name': 'n', 'tags': ['a', 'b']})
        self.assertEqual(item, ItemDC(name='n', qty=1, tags=['a', 'b']))

        item = ItemDC.from_data({'name': 'n'})
        self.assertEqual(item.tags, [])
        self.assertEqual(ItemDC.get_validation_rules(), {
            'name': ['required', 'string'],
            'qty': ['integer'],
            'tags': ['array'],
        })

    def test_read_only_field(self):
        with self.assertRaises(NewInstanceError) as cm:
            FrozenDC.from_data({'a': 1, 'b': 2})

        cause = cm.exception.__cause__
        self.assertIsInstance(cause, NewInstanceError)
        self.assertEqual(str(cause), 'assign property error: b')

    def test_constructor_failure(self):
        with self.assertRaises(NewInstanceError) as cm:
            ExplodingDTO.from_data({'a': 1})

        self.assertIsInstance(cm.exception.__cause__.__cause__, RuntimeError)


class FromDataConfigTest(_ConfigTestBase):
    def test_class_config(self):
        dto = TrimDTO.from_data({'name': '  bob ', 'note': ''})
        self.assertEqual(dto.name, 'bob')
        self.assertEqual(dto.note, 'default')

    def test_explicit_config(self):
        dto = TrimDTO.from_data({'name': ' bob', 'note': None},
                                         config=FromDataConfig(ignore_null=True))
        self.assertEqual(dto.name, ' bob')
        self.assertEqual(dto.note, 'default')

    def test_recursive_trim(self):
        config.set_for_test('dto.from_data_config.base', {'trim': True})

        user = UserDTO.from_data({'name': ' a ', 'age': 1, 'status': 'active',
                                            'address': {'city': ' Paris '},
                                            'nicknames': [' al ']})
        self.assertEqual(user.name, 'a')
        self.assertEqual(user.address.city, 'Paris')
        self.assertEqual(user.nicknames, ['al'])

    def test_bail_all(self):
        with self.assertRaises(ValidationError) as cm:
            BailDTO.from_data({'code': 5})
        self.assertEqual(len(cm.exception.errors['code']), 2)

        with self.assertRaises(ValidationError) as cm:
            BailDTO.from_data({'code': 5}, config=FromDataConfig(
                                       validate_properties_all_with_bail=True))
        self.assertEqual(cm.exception.errors['code'],
                                      ['The code field must be a string.'])

    def test_unknown_key(self):
        self.assertEqual(FromDataConfig.from_dict({'trim': True, 'x': 1}),
                                                       FromDataConfig(trim=True))


class HooksTest(_ConfigTestBase):
    def test_extra_rules_messages_and_attributes(self):
        with self.assertRaises(ValidationError) as cm:
            SignupDTO.from_data({'email': 'nope', 'password': 'x'})

        self.assertEqual(cm.exception.errors, {'email': ['Bad e-mail address']})

    def test_extra_rules_override(self):
        self.assertEqual(SignupDTO.get_validation_rules(), {
            'email': ['required', 'email'],
            'password': ['required', 'string'],
        })


class ToArrayTest(_ConfigTestBase):
    def setUp(self):
        super(ToArrayTest, self).setUp()
        self.profile = ProfileDTO.from_data({'name': 'ann', 'secret': 's'})

    def test_class_config(self):
        self.assertEqual(self.profile.to_array(),
                              {'name': 'ann', 'bio': None, 'display': 'ANN'})

    def test_explicit_config(self):
        self.assertEqual(self.profile.to_array(ToArrayConfig(ignore_null=True)),
                                                {'name': 'ann', 'secret': 's'})

    def test_only(self):
        self.assertEqual(self.profile.to_array(ToArrayConfig(only=['name'])),
                                                               {'name': 'ann'})

    def test_hooks(self):
        dto = PublicProfileDTO.from_data({'name': 'ann', 'secret': 's'})
        self.assertEqual(dto.to_array(), {'name': 'ann', 'display': 'ANN'})

    def test_ignore_null_from_config(self):
        config.set_for_test('dto.to_array_config.ignore_null', True)
        self.assertEqual(self.profile.to_array(ToArrayConfig()),
                                                {'name': 'ann', 'secret': 's'})

    def test_empty_array_as_object(self):
        bag = BagDTO()
        self.assertEqual(bag.to_array(),
                                   {'items': [], 'extra': {}, 'other': []})
        self.assertEqual(bag.to_array(ToArrayConfig(empty_array_as_object=True)),
                                   {'items': {}, 'extra': {}, 'other': {}})
        self.assertEqual(bag.to_array(
                             ToArrayConfig(empty_array_as_object=['items'])),
                                   {'items': {}, 'extra': {}, 'other': []})

    def test_single_key(self):
        bag = BagDTO.from_data({'items': [1, 2]})
        self.assertEqual(bag.to_array(ToArrayConfig(single_key='items')),
                                                                        [1, 2])

    def test_nested_enum_and_date(self):
        user = UserDTO.from_data({
            'name': 'alice',
            'age': 30,
            'status': 'inactive',
            'address': {'city': 'Paris'},
            'tags': [{'label': 'a'}],
            'created': '2024-01-02T03:04:05+02:00',
        })

        self.assertEqual(user.to_array(), {
            'name': 'alice',
            'age': 30,
            'status': 'inactive',
            'address': {'city': 'Paris', 'zip': None},
            'tags': [{'label': 'a'}],
            'nicknames': [],
            'created': '2024-01-02T03:04:05+02:00',
        })

    def test_datetime_format(self):
        config.set_for_test('dto.to_array_config.datetime_format', '%Y-%m-%d')

        user = UserDTO.from_data({'name': 'a', 'age': 1, 'status': 'active',
                                          'created': '2024-01-02T03:04:05Z'})
        self.assertEqual(user.to_array(ToArrayConfig(only=['created'])),
                                                   {'created': '2024-01-02'})


if __name__ == '__main__':
    unittest.main()
