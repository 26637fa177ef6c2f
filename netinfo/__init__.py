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

"""Resolution of the network information an agent needs for its endpoint bindings.

For a running unit, this package works out which space each endpoint is bound
to, which addresses to advertise as ingress points to relation peers, and
which address ranges to report as the source of outbound traffic:

- :func:`~netinfo.new_network_info` returns the processor for a unit:
  :class:`~netinfo.NetworkInfoIAAS` for units on machines,
  :class:`~netinfo.NetworkInfoCAAS` for units running as cluster services.
- :class:`~netinfo.RetryPolicy` bounds how long addresses that have not been
  assigned yet are polled for.
- :mod:`netinfo.params` holds the request and result types, and
  :mod:`netinfo.state` the interfaces of the entity store that is queried.
"""

from __future__ import annotations

# The "from .X import Y" imports below don't explicitly tell Pyright (or MyPy)
# that those symbols are part of the public API, so we have to add __all__.
__all__ = [  # noqa: RUF022 `__all__` is not sorted
    '__version__',
    'params',
    'state',
    # From base.py
    'NetworkInfo',
    'NetworkInfoBase',
    'dedup_network_info_results',
    'new_network_info',
    # From caas.py
    'NetworkInfoCAAS',
    # From config.py
    'ApplicationConfig',
    'ModelConfig',
    'load_retry_policy',
    # From errors.py
    'FormatError',
    'NetInfoError',
    'NoAddressError',
    'NotFoundError',
    'NotValidError',
    'StateError',
    # From iaas.py
    'NetworkInfoIAAS',
    # From network.py
    'ALPHA_SPACE_ID',
    'InterfaceAddress',
    'InterfaceInfo',
    'Scope',
    'SpaceAddress',
    'dedup_ordered',
    'format_as_cidr',
    'sort_addresses',
    'space_addresses_from_network_info',
    'to_cidr',
    # From retry.py
    'RetryPolicy',
    'WallClock',
    'poll_for_address',
]

from . import params, state
from .base import NetworkInfo, NetworkInfoBase, dedup_network_info_results, new_network_info
from .caas import NetworkInfoCAAS
from .config import ApplicationConfig, ModelConfig, load_retry_policy
from .errors import (
    FormatError,
    NetInfoError,
    NoAddressError,
    NotFoundError,
    NotValidError,
    StateError,
)
from .iaas import NetworkInfoIAAS
from .network import (
    ALPHA_SPACE_ID,
    InterfaceAddress,
    InterfaceInfo,
    Scope,
    SpaceAddress,
    dedup_ordered,
    format_as_cidr,
    sort_addresses,
    space_addresses_from_network_info,
    to_cidr,
)
from .retry import RetryPolicy, WallClock, poll_for_address
from .version import version as _version

__version__: str = _version
