
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

"""The ``dtokit.model`` package contains the base classes of DTOs along with the
markers that are attached to their fields and classes.
"""

# Field descriptor
from dtokit.model.rules import ValidationRules
from dtokit.model.rules import is_schema_type

# Class and field markers
from dtokit.model.attrs import FromDataConfig
from dtokit.model.attrs import ToArrayConfig
from dtokit.model.attrs import RequestPropertyIn
from dtokit.model.attrs import RequestPropertyInQuery
from dtokit.model.attrs import RequestPropertyInPath
from dtokit.model.attrs import RequestPropertyInHeader
from dtokit.model.attrs import RequestPropertyInCookie
from dtokit.model.attrs import RequestPropertyInBody
from dtokit.model.attrs import RequestPropertyInForm
from dtokit.model.attrs import RequestPropertyInJson
from dtokit.model.attrs import ResponsePropertyInHeader

# Values
from dtokit.model.file import UploadedFile

# DTOs
from dtokit.model.dto import BaseDTO
from dtokit.model.request import BaseRequestDTO
from dtokit.model.response import BaseResponseDTO
from dtokit.model.config import BaseConfigDTO


__all__ = [
    'ValidationRules', 'is_schema_type',
    'FromDataConfig', 'ToArrayConfig',
    'RequestPropertyIn', 'RequestPropertyInQuery', 'RequestPropertyInPath',
    'RequestPropertyInHeader', 'RequestPropertyInCookie',
    'RequestPropertyInBody', 'RequestPropertyInForm', 'RequestPropertyInJson',
    'ResponsePropertyInHeader',
    'UploadedFile',
    'BaseDTO', 'BaseRequestDTO', 'BaseResponseDTO', 'BaseConfigDTO',
]
