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

import io
import unittest

from typing import Optional

from dtokit.model import BaseDTO, UploadedFile


class AvatarDTO(BaseDTO):
    avatar: UploadedFile
    attachment: Optional[io.IOBase] = None


class UploadedFileTest(unittest.TestCase):
    def test_data(self):
        f = UploadedFile('a.txt', 'text/plain', data=b'hello')

        self.assertEqual(f.size, 5)
        self.assertEqual(f.read(), b'hello')
        self.assertEqual(f.open().read(), b'hello')

    def test_handle(self):
        handle = io.BytesIO(b'hello')
        handle.read(2)
        f = UploadedFile('a.txt', handle=handle)

        self.assertEqual(f.size, 5)
        self.assertEqual(handle.tell(), 2)
        self.assertEqual(f.read(), b'hello')
        self.assertIs(f.open(), handle)

    def test_name(self):
        self.assertRaises(ValueError, UploadedFile, '../etc/passwd')
        self.assertRaises(ValueError, UploadedFile().read)
        self.assertEqual(UploadedFile().size, 0)

    def test_passthrough(self):
        f = UploadedFile('a.txt', data=b'x')
        handle = io.BytesIO(b'y')

        dto = AvatarDTO.from_data({'avatar': f, 'attachment': handle})
        self.assertIs(dto.avatar, f)
        self.assertIs(dto.attachment, handle)
        self.assertEqual(AvatarDTO.get_validation_rules(), {
            'avatar': ['required'],
            'attachment': ['nullable'],
        })


if __name__ == '__main__':
    unittest.main()
