
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

"""ISO-8601 parsing and formatting for the temporal fields of DTOs.

Naive values are assumed to be in :data:`dtokit.LOCAL_TZ`.
"""


import logging
logger = logging.getLogger(__name__)

import re
import pytz
import datetime

from pytz import FixedOffset

import dtokit

DATE_PATTERN = r'(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})'
TIME_PATTERN = r'(?P<hr>\d{2}):(?P<min>\d{2})(:(?P<sec>\d{2})(?P<sec_frac>\.\d+)?)?'
OFFSET_PATTERN = r'(?P<tz_hr>[+-]\d{2}):?(?P<tz_min>\d{2})'
DATETIME_PATTERN = DATE_PATTERN + '[T ]' + TIME_PATTERN

_date_re = re.compile('^%s$' % DATE_PATTERN)
_utc_re = re.compile('^%s[Zz]$' % DATETIME_PATTERN)
_offset_re = re.compile('^%s%s$' % (DATETIME_PATTERN, OFFSET_PATTERN))
_local_re = re.compile('^%s$' % DATETIME_PATTERN)


def _from_match(cls, match, tz=None):
    fields = match.groupdict()

    year = int(fields['year'])
    month = int(fields['month'])
    day = int(fields['day'])
    hour = int(fields.get('hr') or 0)
    minute = int(fields.get('min') or 0)
    second = int(fields.get('sec') or 0)
    usecond = fields.get("sec_frac")
    if usecond is None:
        usecond = 0
    else:
        # datetime can only handle the 6 most significant digits
        usecond = min(999999, int(round(float(usecond) * 1e6)))

    return cls(year, month, day, hour, minute, second, usecond, tz)


def parse_datetime(string, cls=datetime.datetime):
    """Parses an ISO-8601 date or date-time string into an instance of
    ``cls``, which must have the :class:`datetime.datetime` constructor
    signature. Raises ``ValueError`` when the string can't be parsed.
    """

    string = string.strip()

    match = _utc_re.match(string)
    if match:
        return _from_match(cls, match, pytz.utc)

    match = _offset_re.match(string)
    if match:
        tz_hr, tz_min = [int(match.group(x)) for x in ("tz_hr", "tz_min")]
        sign = -1 if match.group('tz_hr').startswith('-') else 1
        offset = sign * (abs(tz_hr) * 60 + tz_min)
        return _from_match(cls, match, FixedOffset(offset))

    match = _local_re.match(string) or _date_re.match(string)
    if match:
        return dtokit.LOCAL_TZ.localize(_from_match(cls, match))

    raise ValueError("%r is not a valid ISO-8601 date-time" % (string,))


def parse_date(string, cls=datetime.date):
    match = _date_re.match(string.strip())
    if match is None:
        dt = parse_datetime(string)
        return cls(dt.year, dt.month, dt.day)

    return cls(int(match.group('year')), int(match.group('month')),
                                                       int(match.group('day')))


def make_temporal(cls, value):
    """Builds an instance of the temporal type ``cls`` out of a raw value.

    Accepts ISO-8601 strings, unix timestamps and instances of :mod:`datetime`
    types.
    """

    is_datetime = issubclass(cls, datetime.datetime)

    # datetime is a subclass of date, but a date field doesn't keep the time
    if isinstance(value, cls) and (is_datetime or
                                 not isinstance(value, datetime.datetime)):
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        dt = datetime.datetime.fromtimestamp(value, dtokit.LOCAL_TZ)
        if is_datetime:
            return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute,
                                     dt.second, dt.microsecond, dt.tzinfo)
        return cls(dt.year, dt.month, dt.day)

    if isinstance(value, datetime.date):
        if is_datetime:
            return dtokit.LOCAL_TZ.localize(cls(value.year, value.month,
                                                                  value.day))
        return cls(value.year, value.month, value.day)

    if isinstance(value, str):
        if is_datetime:
            return parse_datetime(value, cls)
        return parse_date(value, cls)

    raise TypeError("Can't make %r out of %r" % (cls, value))


def is_date_string(value):
    try:
        parse_datetime(value)
    except ValueError:
        return False
    return True


def format_datetime(value, fmt=None):
    """Formats a date or date-time.

    With ``fmt=None`` date-times are rendered as ISO-8601 with seconds
    precision and a ``+HH:MM`` offset, dates as ``YYYY-MM-DD``. Otherwise
    ``fmt`` is fed to ``strftime``.
    """

    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = dtokit.LOCAL_TZ.localize(value)

        if fmt is None:
            return value.replace(microsecond=0).isoformat()

        return value.strftime(fmt)

    if fmt is None:
        return value.isoformat()

    return value.strftime(fmt)
