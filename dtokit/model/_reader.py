
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

"""The ``dtokit.model._reader`` module reads what a class declares: its fields,
the parameters of its constructor and the markers attached to both. It's also
where instances are built out of already-validated data.

Readers are cached per class for the lifetime of the process, use
:func:`get_reader` to get one.
"""

import logging
logger = logging.getLogger(__name__)

import types
import inspect

from collections import OrderedDict

from dtokit.const import DEFAULT_ASSIGN_PROPERTY_MESSAGE
from dtokit.error import DTOError, NewInstanceError, MissingArgumentError
from dtokit.model.attrs import RequestPropertyIn, ResponsePropertyInHeader, \
    FromDataConfig, ToArrayConfig
from dtokit.model.rules import ValidationRules
from dtokit.util.memo import memoize
from dtokit.util.typing import describe, get_class_hints, get_init_hints


PROPERTY = 'property'
PARAMETER = 'parameter'

_SKIPPED_PARAM_KINDS = (inspect.Parameter.VAR_POSITIONAL,
                                                 inspect.Parameter.VAR_KEYWORD)


class FieldInfo(object):
    """What a class says about one of its fields or constructor parameters.

    :param name: Name of the field.
    :param kind: Either ``'property'`` or ``'parameter'``.
    :param type_spec: A :class:`dtokit.util.typing.TypeSpec` instance.
    :param has_default: Whether the field can be left out.
    :param init_has_default: For properties, whether the constructor parameter
        with the same name has a default.
    """

    def __init__(self, name, kind, type_spec, has_default=False,
                                                        init_has_default=False):
        self.name = name
        self.kind = kind
        self.type_spec = type_spec
        self.has_default = has_default
        self.init_has_default = init_has_default
        self.positional_only = False
        self.default = None

    def __repr__(self):
        return "FieldInfo(%r, %r, %r)" % (self.name, self.kind, self.type_spec)

    def is_value_required(self):
        if not self.type_spec.declared:
            return False
        if self.has_default:
            return False

        # a value the constructor can make up on its own isn't required
        return not self.init_has_default

    def get_marker(self, marker_cls):
        """Returns the first ``Annotated`` extra that's an instance of
        ``marker_cls``, or None."""

        for m in self.type_spec.metadata:
            if isinstance(m, marker_cls):
                return m


def _has_class_default(cls, name):
    for klass in cls.__mro__:
        if name in vars(klass):
            value = vars(klass)[name]
            # __slots__ entries are not default values
            return not isinstance(value, types.MemberDescriptorType)
    return False


class ClassReader(object):
    """Reads and caches the declarations of ``cls``."""

    def __init__(self, cls):
        self.cls = cls

        self._properties = None
        self._parameters = None
        self._property_rules = {}
        self._parameter_rules = {}
        self._to_array_config = None

    def __repr__(self):
        return "ClassReader(%s)" % self.cls.__name__

    def get_properties(self):
        """Returns an ordered dict of :class:`FieldInfo` instances for the
        fields of the class, ancestor fields first."""

        if self._properties is None:
            params = self.get_parameters()

            retval = OrderedDict()
            for name, hint in get_class_hints(self.cls).items():
                if name.startswith('_'):
                    continue

                param = params.get(name, None)
                retval[name] = FieldInfo(name, PROPERTY, describe(hint),
                    has_default=_has_class_default(self.cls, name),
                    init_has_default=param is not None and param.has_default,
                )

            logger.debug("%r fields: %r", self.cls, list(retval))
            self._properties = retval

        return self._properties

    def get_property_names(self):
        return list(self.get_properties().keys())

    def get_parameters(self):
        """Returns an ordered dict of :class:`FieldInfo` instances for the
        named parameters of the constructor."""

        if self._parameters is None:
            retval = OrderedDict()

            init = self.cls.__init__
            if init is not object.__init__:
                hints = get_init_hints(self.cls)
                class_hints = None

                sig = inspect.signature(init)
                for i, (name, param) in enumerate(sig.parameters.items()):
                    if i == 0 or param.kind in _SKIPPED_PARAM_KINDS:
                        continue

                    if name in hints:
                        spec = describe(hints[name])
                    else:
                        if class_hints is None:
                            class_hints = get_class_hints(self.cls)

                        # an unannotated parameter takes the type of the
                        # field of the same name
                        if name in class_hints:
                            spec = describe(class_hints[name])
                        else:
                            spec = describe(None, has_annotation=False)

                    info = FieldInfo(name, PARAMETER, spec,
                                has_default=param.default is not param.empty)
                    info.positional_only = \
                                    param.kind == param.POSITIONAL_ONLY
                    if info.has_default:
                        info.default = param.default
                    retval[name] = info

            self._parameters = retval

        return self._parameters

    def get_property_rules(self, name):
        """Returns the :class:`ValidationRules` of the field ``name``, or None
        when there's no such field."""

        return self._get_rules(name, self._property_rules,
                                                         self.get_properties())

    def get_parameter_rules(self, name):
        return self._get_rules(name, self._parameter_rules,
                                                         self.get_parameters())

    def _get_rules(self, name, cache, infos):
        try:
            return cache[name]
        except KeyError:
            pass

        field = infos.get(name, None)
        if field is None:
            return None

        explicit = field.get_marker(ValidationRules)
        if explicit is None:
            rules = ValidationRules()
        else:
            rules = explicit.clone()

        rules.fill_with_field(field)
        rules.normalize()
        logger.debug("%s.%s: %r", self.cls.__name__, name, rules)

        return cache.setdefault(name, rules)

    def get_properties_validation_rules(self):
        """Returns the rule table of every field of the class, without the
        extra rules the class may define."""

        retval = {}
        for name in self.get_properties():
            retval.update(self.get_property_rules(name).get_rules(name))

        return retval

    def get_request_property_in_list(self):
        """Returns a dict of field names to :class:`RequestPropertyIn`
        markers."""

        retval = OrderedDict()
        for name, field in self.get_properties().items():
            marker = field.get_marker(RequestPropertyIn)
            if marker is not None and \
                                  not isinstance(marker, ResponsePropertyInHeader):
                retval[name] = marker
        return retval

    def get_response_header_list(self):
        """Returns a dict of field names to :class:`ResponsePropertyInHeader`
        markers."""

        retval = OrderedDict()
        for name, field in self.get_properties().items():
            marker = field.get_marker(ResponsePropertyInHeader)
            if marker is not None:
                retval[name] = marker
        return retval

    def get_to_array_config(self):
        if self._to_array_config is None:
            retval = getattr(self.cls, '__to_array_config__', None)
            if retval is None:
                retval = ToArrayConfig()
            self._to_array_config = retval

        return self._to_array_config

    def get_from_data_config(self):
        """Returns the class-level :class:`FromDataConfig`, or None."""

        retval = getattr(self.cls, '__from_data_config__', None)
        if retval is not None and not isinstance(retval, FromDataConfig):
            retval = FromDataConfig.from_dict(retval)
        return retval

    def new_instance_by_data(self, data, context=None):
        """Builds an instance of the class out of ``data``, coercing every
        value to the type of its field. ``data`` is not validated here."""

        data = dict(data)
        cls_name = self.cls.__name__

        args = OrderedDict()
        for name, param in self.get_parameters().items():
            if not name in data:
                if param.has_default:
                    # the values of later positional parameters would shift
                    # otherwise
                    if param.positional_only:
                        args[name] = param.default
                    continue
                raise MissingArgumentError(cls_name, name)

            value = data[name]
            rules = self.get_parameter_rules(name)
            args[name] = rules.make_value_from_raw_type(value, context)

            # a plain list can't be resolved with what the constructor says,
            # leave it to the field pass
            unresolved = rules.array and rules.array_item is None \
                                 and isinstance(value, list) and len(value) > 0
            if not unresolved:
                del data[name]

        obj_data = OrderedDict()
        if len(data) > 0:
            for name in self.get_properties():
                if not name in data:
                    continue

                rules = self.get_property_rules(name)
                value = rules.make_value_from_raw_type(data[name], context)
                if name in args:
                    # constructor arguments may be read-only afterwards
                    args[name] = value
                else:
                    obj_data[name] = value

        params = self.get_parameters()
        positional = [v for k, v in args.items() if params[k].positional_only]
        keywords = dict([(k, v) for k, v in args.items()
                                               if not params[k].positional_only])

        try:
            obj = self.cls(*positional, **keywords)
        except DTOError:
            raise
        except Exception as e:
            raise NewInstanceError(cls_name) from e

        for k, v in obj_data.items():
            try:
                setattr(obj, k, v)
            except (AttributeError, TypeError, ValueError) as e:
                raise NewInstanceError(cls_name,
                                      DEFAULT_ASSIGN_PROPERTY_MESSAGE % k) from e

        return obj


@memoize
def get_reader(cls):
    """Returns the cached :class:`ClassReader` of ``cls``."""

    logger.debug("Creating reader for %r", cls)
    return ClassReader(cls)
