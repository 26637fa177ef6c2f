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

"""The entity store, as seen by the network-info resolver.

The resolver never writes to the store, and only relies on the narrow
interfaces below. Methods raise :class:`netinfo.errors.NotFoundError` for
absent entities and :class:`netinfo.errors.StateError` for other failures.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Tuple

from .network import InterfaceInfo, SpaceAddress


@dataclasses.dataclass(frozen=True, kw_only=True)
class Endpoint:
    """One side of a relation."""

    application_name: str
    name: str


@dataclasses.dataclass(frozen=True, kw_only=True)
class MachineNetworkInfoResult:
    """Device records of a machine for one space, or the error fetching them."""

    network_infos: List[InterfaceInfo] = dataclasses.field(default_factory=list)
    error: Optional[Exception] = None


class Machine(Protocol):
    """A conventional machine hosting units."""

    def network_info_for_spaces(
        self, spaces: Iterable[str]
    ) -> Mapping[str, MachineNetworkInfoResult]:
        """Return the machine's device records for each of the given space IDs."""
        ...


class Application(Protocol):
    """An application, owning the endpoint bindings of its units."""

    name: str

    def endpoint_bindings(self) -> Mapping[str, str]:
        """Return the mapping of endpoint name to bound space ID."""
        ...

    def application_config(self) -> Mapping[str, Any]:
        """Return the application's settings, such as the service type."""
        ...


class Unit(Protocol):
    """The unit the network information is resolved for."""

    name: str
    application_name: str

    def should_be_assigned(self) -> bool:
        """Report whether the unit is placed on a conventional machine."""
        ...

    def application(self) -> Application: ...

    def assigned_machine(self) -> Machine:
        """Return the machine the unit runs on; only valid for machine units."""
        ...

    def all_addresses(self) -> List[SpaceAddress]: ...

    def public_address(self) -> SpaceAddress:
        """Return the best public address, or raise NoAddressError."""
        ...

    def private_address(self) -> SpaceAddress:
        """Return the best private address, or raise NoAddressError."""
        ...


class Relation(Protocol):
    """A relation between two endpoints, possibly across models."""

    id: int

    @property
    def key(self) -> str:
        """The relation key, for example 'wordpress:db mysql:server'."""
        ...

    def endpoint(self, application_name: str) -> Endpoint:
        """Return the endpoint of the relation owned by the named application."""
        ...

    def remote_application(self) -> Tuple[Optional[str], bool]:
        """Return the name of the remote application, and whether the relation is cross-model."""
        ...


class State(Protocol):
    """The queries the resolver makes against the entity store."""

    def unit(self, name: str) -> Unit: ...

    def relation(self, relation_id: int) -> Relation: ...

    def relation_egress_networks(self, relation_key: str) -> List[str]:
        """Return the egress override of a relation, or raise NotFoundError."""
        ...

    def model_config(self) -> Mapping[str, Any]: ...
