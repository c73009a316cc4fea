
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

"""dtokit turns loosely-typed input (request parameters, decoded JSON, config
arrays) into typed, validated data transfer objects and back.
"""

__version__ = '1.0.0'

from pytz import utc as LOCAL_TZ

from dtokit.error import DTOError
from dtokit.error import ConfigurationError
from dtokit.error import ValidationError
from dtokit.error import NewInstanceError
from dtokit.error import CoercionError
from dtokit.error import MissingArgumentError

from dtokit.model import *
