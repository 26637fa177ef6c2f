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

"""Bounded polling for addresses that may not have landed in the entity store yet."""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Callable, Protocol, TypeVar

from .errors import NoAddressError
from .log import TRACE
from .network import SpaceAddress

logger = logging.getLogger(__name__)

_T = TypeVar('_T')

DEFAULT_DELAY = 3.0
"""Default number of seconds to sleep between attempts."""

DEFAULT_MAX_DURATION = 30.0
"""Default number of seconds after which polling gives up."""


class Clock(Protocol):
    """The time source used by the poller."""

    def time(self) -> float: ...

    def sleep(self, delay: float) -> None: ...


class WallClock:
    """A :class:`Clock` backed by the monotonic system clock."""

    def time(self) -> float:
        return time.monotonic()

    def sleep(self, delay: float) -> None:
        time.sleep(delay)


@dataclasses.dataclass(frozen=True, kw_only=True)
class RetryPolicy:
    """How long, and how often, to poll for an address."""

    clock: Clock = dataclasses.field(default_factory=WallClock)
    """Time source; tests inject a fake one."""

    delay: float = DEFAULT_DELAY
    """Seconds to wait between attempts."""

    max_duration: float = DEFAULT_MAX_DURATION
    """Total seconds after which no further attempt is started."""

    def __post_init__(self):
        if self.delay < 0:
            raise ValueError(f'delay must not be negative, not {self.delay}')
        if self.max_duration <= 0:
            raise ValueError(f'max_duration must be positive, not {self.max_duration}')


def _is_retryable(err: Exception) -> bool:
    return isinstance(err, NoAddressError)


def call(func: Callable[[], _T], policy: RetryPolicy) -> _T:
    """Call func until it succeeds, a fatal error is raised, or time runs out.

    Only :class:`NoAddressError` is retried. Any other exception propagates
    immediately. Attempts are sequential; no new attempt is started once
    starting it would go past ``policy.max_duration``.

    Raises:
        NoAddressError: the last retryable error, once the time budget is spent.
    """
    clock = policy.clock
    start = clock.time()
    attempt = 0
    while True:
        attempt += 1
        try:
            return func()
        except Exception as e:
            if not _is_retryable(e):
                raise
            elapsed = clock.time() - start
            if elapsed + policy.delay > policy.max_duration:
                logger.log(TRACE, 'giving up after %d attempts (%.1fs): %s', attempt, elapsed, e)
                raise
            logger.log(TRACE, 'attempt %d failed: %s; retrying in %.1fs', attempt, e, policy.delay)
        clock.sleep(policy.delay)


def poll_for_address(fetch: Callable[[], SpaceAddress], policy: RetryPolicy) -> SpaceAddress:
    """Poll fetch until it yields an address; see :func:`call`."""
    return call(fetch, policy)
