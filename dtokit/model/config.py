
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

"""The ``dtokit.model.config`` module contains :class:`BaseConfigDTO`, the
base class of DTOs that hold configuration. ::

    class MailerConfigDTO(BaseConfigDTO):
        host: str = 'localhost'
        port: int = 25

        @classmethod
        def get_app_config(cls):
            return settings.MAILER

    mailer = Mailer(MailerConfigDTO.from_config({'port': 587}))
"""

import logging
logger = logging.getLogger(__name__)

from dtokit import config as dtokit_config
from dtokit.const import DEFAULT_CONFIG_DTO_VALIDATE
from dtokit.model.dto import BaseDTO
from dtokit.util.dictutil import merge


class BaseConfigDTO(BaseDTO):
    @classmethod
    def get_app_config(cls):
        """Override this to return the application-wide values, which the
        values passed to :meth:`from_config` override."""

        return {}

    @classmethod
    def from_config(cls, config=None, validate=None):
        """Builds an instance out of the application-wide values merged with
        ``config``. Returns ``config`` itself when it's already an instance.

        :param validate: Whether to validate. ``dto.config_dto_validate``
            decides when None.
        """

        if isinstance(config, cls):
            return config

        if validate is None:
            validate = dtokit_config.get('dto.config_dto_validate',
                                                    DEFAULT_CONFIG_DTO_VALIDATE)

        data = merge(cls.get_app_config(), config or {})
        return cls.from_data(data, validate=validate)
