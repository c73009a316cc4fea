
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

"""The ``dtokit.const`` package contains the default values of the knobs
that :mod:`dtokit.config` exposes."""


CONFIG_PREFIX = 'dto.'
"""Every configuration key dtokit reads starts with this prefix."""

DEFAULT_FROM_DATA_CONFIG = {
    'ignore_null': False,
    'ignore_empty': False,
    'trim': False,
    'validate_properties_all_with_bail': False,
}
"""Defaults of :class:`dtokit.model.attrs.FromDataConfig`. Override them for
plain DTOs with ``dto.from_data_config.base`` and for request DTOs with
``dto.from_data_config.request``."""

DEFAULT_DATETIME_FORMAT = None
"""Format used when serializing date-time fields. ``None`` means ISO-8601 with
seconds precision and a ``+HH:MM`` offset."""

DEFAULT_RESPONSE_FORMAT = 'json'
"""What :meth:`dtokit.model.response.BaseResponseDTO.to_response` produces.
Either ``'json'`` or a callable that gets the DTO instance."""

DEFAULT_CONFIG_DTO_VALIDATE = False
"""Whether :meth:`dtokit.model.config.BaseConfigDTO.from_config` validates its
input when not told explicitly. Configuration is usually written by the same
people who write the code."""

DEFAULT_NULLABLE_EMPTY_STRING_AS_NULL = True
"""When True, an empty string given for a nullable field is coerced to
``None``. When False, only ``None`` itself is."""

DEFAULT_CAST_SCALAR_STRINGS = True
"""When True, strings given for integer, numeric and boolean fields are cast to
the field type, the way query string and form values need to be."""

DEFAULT_ASSIGN_PROPERTY_MESSAGE = "assign property error: %s"
"""Message used when a value can't be assigned to an attribute of a DTO."""
