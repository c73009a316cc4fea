
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

"""Helpers that turn Python type annotations into the bits of information the
rule compiler needs: is there a declared type at all, does it allow ``None``,
which class does it name, and what are the items of a collection.

Generic arguments (``list[Address]``, ``dict[str, Tag]``) play the role that
"array of X" doc comments play in other ecosystems.
"""

import logging
logger = logging.getLogger(__name__)

import types
import typing

from collections import abc
from decimal import Decimal

from dtokit.error import ConfigurationError


NoneType = type(None)

_UNION_TYPES = (typing.Union,)
if hasattr(types, 'UnionType'):
    _UNION_TYPES = (typing.Union, types.UnionType)

SCALAR_TYPES = {
    int: 'integer',
    str: 'string',
    bool: 'boolean',
    float: 'numeric',
    Decimal: 'numeric',
}
"""Maps builtin scalar types to primitive type categories."""

ARRAY_TYPES = (list, tuple, set, frozenset, dict)
"""Builtin types that are treated as plain arrays when not parametrized."""

_LIST_ORIGINS = (list, tuple, set, frozenset, abc.Sequence,
                 abc.MutableSequence, abc.Set, abc.MutableSet, abc.Iterable,
                 abc.Collection)
_MAP_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


class TypeSpec(object):
    """What an annotation says about a field.

    :param declared: False when there is no annotation or it's ``Any``.
    :param nullable: True when ``None`` is an accepted value.
    :param type: The annotation with ``Annotated`` and ``Optional`` stripped.
        None when there's no single type to talk about.
    :param metadata: The extras found in ``Annotated[...]``.
    """

    __slots__ = ('declared', 'nullable', 'type', 'metadata')

    def __init__(self, declared, nullable, type_=None, metadata=()):
        self.declared = declared
        self.nullable = nullable
        self.type = type_
        self.metadata = metadata

    def __repr__(self):
        return "TypeSpec(declared=%r, nullable=%r, type=%r, metadata=%r)" % (
                        self.declared, self.nullable, self.type, self.metadata)


def _is_annotated(tp):
    return typing.get_origin(tp) is typing.Annotated


def describe(annotation, has_annotation=True):
    if not has_annotation or annotation is typing.Any:
        return TypeSpec(False, True)

    metadata = ()
    if _is_annotated(annotation):
        metadata = annotation.__metadata__
        annotation = annotation.__origin__
        if annotation is typing.Any:
            return TypeSpec(False, True, metadata=metadata)

    if annotation is None or annotation is NoneType:
        return TypeSpec(True, True, metadata=metadata)

    if typing.get_origin(annotation) in _UNION_TYPES:
        args = typing.get_args(annotation)
        nullable = NoneType in args
        rest = [a for a in args if a is not NoneType]
        if len(rest) == 1:
            inner = rest[0]
            if _is_annotated(inner):
                metadata = metadata + inner.__metadata__
                inner = inner.__origin__
            return TypeSpec(True, nullable, inner, metadata)

        # several types at once: no type category can be derived
        return TypeSpec(True, nullable, None, metadata)

    return TypeSpec(True, False, annotation, metadata)


def is_class(tp):
    # list[int] passes isinstance(tp, type) on some versions
    return isinstance(tp, type) and typing.get_origin(tp) is None


def scalar_category(tp):
    """Returns the primitive category of a builtin type, or None."""

    if tp in SCALAR_TYPES:
        return SCALAR_TYPES[tp]
    if tp in ARRAY_TYPES:
        return 'array'

    origin = typing.get_origin(tp)
    if origin in _LIST_ORIGINS or origin in _MAP_ORIGINS:
        return 'array'

    return None


def get_collection_items(tp):
    """Returns ``(kind, item_type)`` for a parametrized collection annotation
    where ``kind`` is either ``'list'`` or ``'map'``. Returns ``(None, None)``
    when the annotation doesn't say anything about its items.

    >>> get_collection_items(list[int])
    ('list', <class 'int'>)
    >>> get_collection_items(dict[str, int])
    ('map', <class 'int'>)
    >>> get_collection_items(tuple[int, str])
    (None, None)
    """

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)
    if origin is None or len(args) == 0:
        return None, None

    if origin in _MAP_ORIGINS:
        if len(args) != 2:
            return None, None
        return 'map', args[1]

    if origin is tuple:
        # only the homogeneous form tuple[X, ...] has a single item type
        if len(args) == 2 and args[1] is Ellipsis:
            return 'list', args[0]
        return None, None

    if origin in _LIST_ORIGINS:
        if len(args) != 1:
            return None, None
        return 'list', args[0]

    return None, None


def _is_class_var(tp):
    return tp is typing.ClassVar or typing.get_origin(tp) is typing.ClassVar


def get_class_hints(cls):
    """Resolved annotations of ``cls`` and its bases, ancestors first and
    forward references included. ``ClassVar`` annotations are left out."""

    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise ConfigurationError("Can't resolve annotations of %r: %s"
                                                                   % (cls, e))

    return dict((k, v) for k, v in hints.items() if not _is_class_var(v))


def get_init_hints(cls):
    """Resolved annotations of ``cls.__init__``."""

    init = cls.__init__
    localns = dict(vars(cls))
    localns.setdefault(cls.__name__, cls)

    try:
        return typing.get_type_hints(init, localns=localns,
                                                           include_extras=True)
    except NameError as e:
        raise ConfigurationError("Can't resolve annotations of %r: %s"
                                                                  % (init, e))
