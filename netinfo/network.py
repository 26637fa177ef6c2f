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

"""Addresses, scopes, and the helpers used to order and format them."""

from __future__ import annotations

import dataclasses
import enum
import ipaddress
import logging
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, TypeVar, Union

from .errors import FormatError

logger = logging.getLogger(__name__)

_T = TypeVar('_T')

ALPHA_SPACE_ID = '0'
"""The ID of the default space, used for endpoints that were never bound to another space."""

ALPHA_SPACE_NAME = 'alpha'

FAN_INTERFACE_PREFIX = 'fan-'

_CGNAT_NETWORK = ipaddress.ip_network('100.64.0.0/10')
_ULA_NETWORK = ipaddress.ip_network('fc00::/7')


class Scope(enum.Enum):
    """The reachability of an address."""

    PUBLIC = 'public'
    CLOUD_LOCAL = 'local-cloud'
    FAN_LOCAL = 'local-fan'
    MACHINE_LOCAL = 'local-machine'
    LINK_LOCAL = 'link-local'
    UNKNOWN = 'unknown'

    @property
    def rank(self) -> int:
        """Sort rank of the scope; lower ranks are preferred for advertisement."""
        return _SCOPE_RANKS[self]


# Fan addresses rank after every normal scope, but before unknown.
_SCOPE_RANKS = {
    Scope.PUBLIC: 0,
    Scope.CLOUD_LOCAL: 1,
    Scope.MACHINE_LOCAL: 2,
    Scope.LINK_LOCAL: 3,
    Scope.FAN_LOCAL: 4,
    Scope.UNKNOWN: 5,
}


@dataclasses.dataclass(frozen=True)
class SpaceAddress:
    """A unit address annotated with its scope and, where known, its space."""

    value: str
    # These may be IP addresses or hostnames, so we keep things simple and use
    # str, and only convert to ipaddress types where a CIDR is needed.
    scope: Scope = Scope.UNKNOWN
    space_id: str = ''

    def __str__(self):
        return self.value


@dataclasses.dataclass(frozen=True, kw_only=True)
class InterfaceAddress:
    """An address found on a network device."""

    address: str
    cidr: str = ''


@dataclasses.dataclass(frozen=True, kw_only=True)
class InterfaceInfo:
    """The addresses of a single network device.

    The cluster-service substrate has no real devices, so it reports a single
    unnamed device carrying the unit's machine-local addresses.
    """

    interface_name: str = ''
    mac_address: str = ''
    addresses: List[InterfaceAddress] = dataclasses.field(default_factory=list)


def derive_scope(value: str) -> Scope:
    """Guess the scope of an address from its value alone."""
    if value == 'localhost':
        return Scope.MACHINE_LOCAL
    try:
        ip = ipaddress.ip_address(value)
    except ValueError:
        logger.debug('could not derive scope of %r, it is not an IP address', value)
        return Scope.UNKNOWN
    if ip.is_loopback:
        return Scope.MACHINE_LOCAL
    if ip.is_link_local:
        return Scope.LINK_LOCAL
    if ip.version == 6 and ip in _ULA_NETWORK:
        return Scope.CLOUD_LOCAL
    if ip.version == 4 and (ip.is_private or ip in _CGNAT_NETWORK):
        return Scope.CLOUD_LOCAL
    return Scope.PUBLIC


def new_scoped_space_address(value: str, scope: Scope = Scope.UNKNOWN) -> SpaceAddress:
    """Return a SpaceAddress for value; an unknown scope is derived from the value."""
    if scope is Scope.UNKNOWN:
        scope = derive_scope(value)
    return SpaceAddress(value, scope)


def sort_addresses(addresses: Iterable[SpaceAddress]) -> List[SpaceAddress]:
    """Return the addresses sorted by scope rank, most preferred first.

    The sort is stable: addresses of equal rank keep their relative order.
    """
    return sorted(addresses, key=lambda a: a.scope.rank)


def dedup_ordered(
    values: Iterable[_T], key: Optional[Callable[[_T], Hashable]] = None
) -> List[_T]:
    """Return values with later duplicates removed, keeping first-seen order.

    Args:
        values: the values to deduplicate.
        key: computes the identity of a value; defaults to the value itself.
    """
    seen: set[Hashable] = set()
    out: List[_T] = []
    for value in values:
        k = value if key is None else key(value)
        if k in seen:
            continue
        seen.add(k)
        out.append(value)
    return out


def dedup_interface_addresses(addresses: Sequence[InterfaceAddress]) -> List[InterfaceAddress]:
    """Deduplicate a device's addresses by address value."""
    if len(addresses) <= 1:
        return list(addresses)
    return dedup_ordered(addresses, key=lambda a: a.address)


def to_cidr(address: Union[str, SpaceAddress]) -> str:
    """Format a single address as a single-host network range.

    A value that is already a network range is validated and returned unchanged.

    Raises:
        FormatError: if the value is not a valid IP address or network.
    """
    value = str(address)
    try:
        if '/' in value:
            ipaddress.ip_network(value, strict=False)
            return value
        ip = ipaddress.ip_address(value)
    except ValueError:
        raise FormatError(f'cannot format {value!r} as a CIDR') from None
    return f'{ip}/{ip.max_prefixlen}'


def format_as_cidr(addresses: Iterable[Union[str, SpaceAddress]]) -> List[str]:
    """Format each address as a CIDR; see :func:`to_cidr`."""
    return [to_cidr(address) for address in addresses]


def space_addresses_from_network_info(infos: Iterable[InterfaceInfo]) -> List[SpaceAddress]:
    """Build sortable addresses from device records.

    Device records carry no scope information. Addresses on fan devices are
    pinned to the fan scope so that they sort after the others; the rest have
    their scope derived from the value.
    """
    addrs: List[SpaceAddress] = []
    for info in infos:
        scope = Scope.UNKNOWN
        if info.interface_name.startswith(FAN_INTERFACE_PREFIX):
            scope = Scope.FAN_LOCAL
        for addr in info.addresses:
            addrs.append(new_scoped_space_address(addr.address, scope))
    return addrs
