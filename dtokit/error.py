
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

"""The ``dtokit.error`` module contains the exceptions that dtokit raises.

Just like HTTP 4xx and 5xx codes, a ``faultcode`` starting with ``'Client'``
means something was wrong with the input and one starting with ``'Server'``
means something is wrong with the code, be it a malformed schema declaration or
data that the schema accepted but the target class refused.
"""


class DTOError(Exception):
    """Base class for all dtokit exceptions.

    :param faultcode: Dot-delimited code, either ``'Client...'`` or
        ``'Server...'``.
    :param faultstring: Human-readable explanation of the error.
    :param detail: Additional information.
    """

    CODE = 'Server'

    def __init__(self, faultcode=None, faultstring="", detail=None):
        if faultcode is None:
            faultcode = self.CODE

        super(DTOError, self).__init__(faultstring)

        self.faultcode = faultcode
        self.faultstring = faultstring or self.__class__.__name__
        self.detail = detail

    def __str__(self):
        return self.faultstring

    def __repr__(self):
        if self.detail is None:
            return "%s(%s: %r)" % (self.__class__.__name__,
                                               self.faultcode, self.faultstring)

        return "%s(%s: %r detail: %r)" % (self.__class__.__name__,
                                  self.faultcode, self.faultstring, self.detail)

    @property
    def is_client_error(self):
        return self.faultcode == 'Client' or self.faultcode.startswith('Client.')


class ConfigurationError(DTOError):
    """Raised when a schema declaration is malformed: several primitive types on
    one field, an enum or class reference that can't be resolved, an enum
    without usable values, etc. This is never caught by dtokit itself."""

    CODE = 'Server.ConfigurationError'

    def __init__(self, faultstring=""):
        super(ConfigurationError, self).__init__(self.CODE, faultstring)


class ValidationError(DTOError):
    """Raised when the input data does not adhere to the rules of a DTO.

    :param errors: A dict mapping field paths to lists of messages, in the
        order the rules were checked.
    """

    CODE = 'Client.ValidationError'

    def __init__(self, errors):
        self.errors = dict(errors)

        super(ValidationError, self).__init__(self.CODE,
                                    "ValidationError: %s" % (self.first(),),
                                                             detail=self.errors)

    def first(self):
        """Returns the first message of the first failing field."""

        for messages in self.errors.values():
            if isinstance(messages, (list, tuple)):
                if len(messages) > 0:
                    return messages[0]
            elif messages is not None:
                return messages

        return ""

    def first_errors(self):
        """Returns a dict with only the first message of every field."""

        retval = {}
        for k, messages in self.errors.items():
            if isinstance(messages, (list, tuple)):
                retval[k] = messages[0] if len(messages) > 0 else ""
            else:
                retval[k] = messages
        return retval


class NewInstanceError(DTOError):
    """Raised when validated data can't be turned into an instance of the
    target class. The original exception is available as ``__cause__``."""

    CODE = 'Server.NewInstanceError'

    def __init__(self, class_name, message=None):
        self.class_name = class_name
        if message is None:
            message = "new %s failed" % (class_name,)

        super(NewInstanceError, self).__init__(self.CODE, message)


class CoercionError(NewInstanceError):
    """Raised when a raw value can't be coerced to the declared type of a
    field, e.g. an enum value that's out of range."""

    CODE = 'Server.CoercionError'

    def __init__(self, type_name, message):
        super(CoercionError, self).__init__(type_name, message)


class MissingArgumentError(DTOError):
    """Raised when a mandatory constructor argument is missing from the data.

    This means the validation rules and the constructor disagree, which is a
    bug in the schema declaration."""

    CODE = 'Server.MissingArgument'

    def __init__(self, class_name, argument):
        self.class_name = class_name
        self.argument = argument

        super(MissingArgumentError, self).__init__(self.CODE,
                        "class %s construct parameter %s is missing" %
                                                        (class_name, argument))
