
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

"""The ``dtokit.model.file`` module contains the value type of uploaded files.
Fields annotated with :class:`UploadedFile` are assigned whatever the request
adapter returned, without coercion.
"""

import logging
logger = logging.getLogger(__name__)

import os

from io import BytesIO


class UploadedFile(object):
    """A file that came with a request.

    :param name: The file basename as sent by the client. Directory information
        is refused.
    :param type: The mime type of the file's contents.
    :param data: The contents of the file, as ``bytes``.
    :param handle: An open binary file object, used when ``data`` is None.
    """

    def __init__(self, name=None, type='application/octet-stream', data=None,
                                                                   handle=None):
        if name is not None and os.path.basename(name) != name:
            raise ValueError("File name %r should not contain any directory "
                                                             "information" % name)

        self.name = name
        """The file basename, no directory information here."""

        self.type = type
        """Mime type of the file"""

        self.data = data
        self.handle = handle

    @property
    def size(self):
        if self.data is not None:
            return len(self.data)

        if self.handle is not None:
            pos = self.handle.tell()
            self.handle.seek(0, os.SEEK_END)
            retval = self.handle.tell()
            self.handle.seek(pos)
            return retval

        return 0

    def read(self):
        """Returns the whole contents of the file."""

        if self.data is not None:
            return self.data

        if self.handle is None:
            raise ValueError("Invalid file object. Both .data and .handle "
                                                                  "are None.")

        self.handle.seek(0)
        return self.handle.read()

    def open(self):
        """Returns a binary file object that reads the contents of the file."""

        if self.handle is not None:
            self.handle.seek(0)
            return self.handle

        return BytesIO(self.read())

    def __repr__(self):
        return "UploadedFile(name=%r, type=%r, size=%r)" % \
                                                (self.name, self.type, self.size)
