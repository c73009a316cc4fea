
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

"""The ``dtokit.integration.validation`` module contains the validator
interface and the factory that returns the validator DTOs use.

The default validator is :class:`dtokit.integration.validator.RuleValidator`.
Set ``dto.validator_factory`` to a :class:`ValidatorInterface` subclass, an
instance or a callable that returns an instance to use another one.
"""

import logging
logger = logging.getLogger(__name__)

import copy
import threading

from dtokit import config
from dtokit.error import ConfigurationError


class ValidatorInterface(object):
    def validate(self, data, rules, messages=None, custom_attributes=None):
        """Validates ``data`` against the rule table ``rules``.

        :param data: The input dict.
        :param rules: A dict of field paths to lists of rule directives.
        :param messages: A dict of custom messages, keyed by
            ``'path.directive'`` or ``'directive'``.
        :param custom_attributes: A dict of field paths to the names used for
            them in messages.
        :return: The validated data.
        :raises dtokit.error.ValidationError: When any directive fails.
        """

        raise NotImplementedError()


class StopOnFirstFailureMixin(object):
    """For validators that can stop at the first failing field."""

    stop_on_first_failure_enabled = False

    def stop_on_first_failure(self, stop=True):
        """Returns a copy of the validator that stops at the first failing
        field. The validator itself is not modified."""

        retval = copy.copy(self)
        retval.stop_on_first_failure_enabled = stop
        return retval


class Validation(object):
    _instance = None
    _lock = threading.Lock()

    @classmethod
    def create(cls):
        """Returns the process-wide validator instance."""

        if cls._instance is None:
            instance = cls._make()
            with cls._lock:
                if cls._instance is None:
                    cls._instance = instance

        return cls._instance

    @classmethod
    def reset(cls):
        """Forgets the validator instance so that the next :meth:`create`
        call reads configuration again."""

        with cls._lock:
            cls._instance = None

    @classmethod
    def _make(cls):
        factory = config.get('dto.validator_factory')
        if factory is None:
            from dtokit.integration.validator import RuleValidator
            return RuleValidator()

        if isinstance(factory, ValidatorInterface):
            return factory

        if isinstance(factory, type):
            if not issubclass(factory, ValidatorInterface):
                raise ConfigurationError("validator_factory error: %r is not a "
                                           "ValidatorInterface subclass" % factory)
            return factory()

        if callable(factory):
            retval = factory()
            if not isinstance(retval, ValidatorInterface):
                raise ConfigurationError("validator_factory error: %r returned "
                                                                 "%r" % (factory, retval))
            return retval

        raise ConfigurationError("validator_factory error: %r" % (factory,))
