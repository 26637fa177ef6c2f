# Copyright 2026 Canonical Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Time conversion utilities."""

from __future__ import annotations

import re
from typing import Union

# Matches n.n<unit> (allow U+00B5 micro symbol as well as U+03BC Greek letter mu)
_DURATION_RE = re.compile(r'([0-9.]+)([a-zµμ]+)')

_UNIT_SECONDS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,  # U+00B5 (micro symbol)
    'μs': 1e-6,  # U+03BC (Greek letter mu)
    'ms': 1e-3,
    's': 1,
    'm': 60,
    'h': 3600,
}


def parse_duration(s: str) -> float:
    """Parse a formatted Go duration into a number of seconds.

    Accepts the output of Go's time.Duration.String method, for example "3s"
    or "1m30s". Units are required after each number part, except for a bare
    "0".
    """
    s = s.strip()
    negative = False
    if s and s[0] in '+-':
        negative = s[0] == '-'
        s = s[1:]

    if s == '0':
        return 0.0

    matches = list(_DURATION_RE.finditer(s))
    if not matches:
        raise ValueError('invalid duration: no number-unit groups')
    if matches[0].start() != 0 or matches[-1].end() != len(s):
        raise ValueError('invalid duration: extra input at start or end')

    total = 0.0
    for match in matches:
        number, unit = match.groups()
        scale = _UNIT_SECONDS.get(unit)
        if scale is None:
            raise ValueError(f'invalid duration: invalid unit {unit!r}')
        total += _duration_number(number) * scale

    return -total if negative else total


def _duration_number(s: str) -> Union[int, float]:
    try:
        try:
            return int(s)
        except ValueError:
            return float(s)
    except ValueError:
        # Same exception type, but a slightly more specific error message
        raise ValueError(f'invalid duration: {s!r} is not a valid float') from None
