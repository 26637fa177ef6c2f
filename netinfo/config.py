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

"""Model, application, and retry-policy configuration."""

from __future__ import annotations

import dataclasses
import ipaddress
from typing import Any, List, Mapping, Optional, TextIO, Union

import yaml

from ._private import timeconv
from .retry import DEFAULT_DELAY, DEFAULT_MAX_DURATION, Clock, RetryPolicy, WallClock

# Use C speedups if available
_safe_loader = getattr(yaml, 'CSafeLoader', yaml.SafeLoader)

EGRESS_SUBNETS_KEY = 'egress-subnets'
SERVICE_TYPE_KEY = 'kubernetes-service-type'

# Service types whose addresses are provisioned outside the cluster, and so
# may not be known yet when a relation is joined.
POLLED_SERVICE_TYPES = frozenset({'LoadBalancer', 'ExternalName'})


def safe_load(stream: Union[str, TextIO]) -> Any:
    """Same as yaml.safe_load, but use fast C loader if available."""
    return yaml.load(stream, Loader=_safe_loader)  # noqa: S506


def _parse_cidrs(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        items = raw.split(',')
    elif isinstance(raw, (list, tuple)):
        items = [str(item) for item in raw]
    else:
        raise ValueError(
            f'{EGRESS_SUBNETS_KEY} must be a string or list, not {type(raw).__name__}')
    cidrs: List[str] = []
    for item in items:
        item = item.strip()
        if not item:
            continue
        try:
            ipaddress.ip_network(item, strict=False)
        except ValueError:
            raise ValueError(f'invalid {EGRESS_SUBNETS_KEY} entry {item!r}') from None
        cidrs.append(item)
    return cidrs


@dataclasses.dataclass(frozen=True, kw_only=True)
class ModelConfig:
    """The parts of the model configuration used when resolving network info."""

    egress_subnets: List[str] = dataclasses.field(default_factory=list)
    """CIDRs advertised as the source of outbound traffic when a relation sets none."""

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> ModelConfig:
        return cls(egress_subnets=_parse_cidrs(d.get(EGRESS_SUBNETS_KEY)))


class ApplicationConfig:
    """Read-only view of an application's settings."""

    def __init__(self, settings: Optional[Mapping[str, Any]] = None):
        self._settings = dict(settings or {})

    def get_string(self, key: str, default: str = '') -> str:
        value = self._settings.get(key)
        if value is None:
            return default
        return str(value)

    @property
    def service_type(self) -> str:
        """The type of cluster service fronting the application, if any."""
        return self.get_string(SERVICE_TYPE_KEY)

    @property
    def requires_address_polling(self) -> bool:
        """Whether the service address is assigned externally, and so may lag behind."""
        return self.service_type in POLLED_SERVICE_TYPES


def _seconds(raw: Any, name: str) -> float:
    if isinstance(raw, bool):
        raise ValueError(f'{name} must be a duration, not a boolean')
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        return timeconv.parse_duration(raw)
    raise ValueError(f'{name} must be a number of seconds or a duration string')


def load_retry_policy(
    source: Union[str, TextIO, Mapping[str, Any], None] = None,
    clock: Optional[Clock] = None,
) -> RetryPolicy:
    """Build a :class:`RetryPolicy` from YAML or a mapping.

    Recognised keys are ``delay`` and ``max-duration``; each is a number of
    seconds or a Go duration string such as ``"3s"``. Missing keys take the
    defaults.

    Example::

        >>> load_retry_policy('delay: 1s\\nmax-duration: 1m')
        RetryPolicy(clock=..., delay=1.0, max_duration=60.0)
    """
    if source is None:
        data: Any = {}
    elif isinstance(source, Mapping):
        data = source
    else:
        data = safe_load(source) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f'retry policy must be a mapping, not {type(data).__name__}')

    delay = _seconds(data.get('delay', DEFAULT_DELAY), 'delay')
    max_duration = _seconds(data.get('max-duration', DEFAULT_MAX_DURATION), 'max-duration')
    return RetryPolicy(
        clock=clock if clock is not None else WallClock(),
        delay=delay,
        max_duration=max_duration,
    )
