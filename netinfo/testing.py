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

"""Infrastructure to build unit tests for network-info consumers.

:class:`FakeState` is an in-memory entity store, and :class:`FakeClock` a
virtual timeline, so that polling can be exercised without real delays::

    clock = FakeClock()
    state = FakeState()
    app = state.add_application('mysql', bindings={'db': '0'})
    state.add_unit('mysql/0', app, addresses=[SpaceAddress('10.0.0.1', Scope.CLOUD_LOCAL)])
    info = new_network_info(state, 'mysql/0', RetryPolicy(clock=clock))
"""

from __future__ import annotations

import dataclasses
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .errors import NoAddressError, NotFoundError, StateError
from .network import SpaceAddress
from .state import Endpoint, MachineNetworkInfoResult

# An address source is either a fixed address (or None, for "not assigned"),
# or a callable consulted on every lookup.
AddressSource = Union[SpaceAddress, None, Callable[[], Optional[SpaceAddress]]]


class FakeClock:
    """A clock whose sleep() advances time() instantly.

    Every call to sleep() is recorded in :attr:`sleeps`.
    """

    def __init__(self, start: float = 0.0):
        self._time = start
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self._time

    def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self._time += delay

    def advance(self, seconds: float) -> None:
        self._time += seconds


class FakeApplication:
    """An application with fixed bindings and settings."""

    def __init__(
        self,
        name: str,
        bindings: Optional[Mapping[str, str]] = None,
        config: Optional[Mapping[str, Any]] = None,
    ):
        self.name = name
        self.bindings: Dict[str, str] = dict(bindings or {})
        self.config: Dict[str, Any] = dict(config or {})

    def endpoint_bindings(self) -> Mapping[str, str]:
        return dict(self.bindings)

    def application_config(self) -> Mapping[str, Any]:
        return dict(self.config)


class FakeMachine:
    """A machine with fixed per-space device records."""

    def __init__(self, network_infos: Optional[Mapping[str, MachineNetworkInfoResult]] = None):
        self.network_infos: Dict[str, MachineNetworkInfoResult] = dict(network_infos or {})
        self.requested_spaces: List[List[str]] = []

    def network_info_for_spaces(
        self, spaces: Iterable[str]
    ) -> Mapping[str, MachineNetworkInfoResult]:
        spaces = list(spaces)
        self.requested_spaces.append(spaces)
        result: Dict[str, MachineNetworkInfoResult] = {}
        for space in spaces:
            info = self.network_infos.get(space)
            if info is None:
                info = MachineNetworkInfoResult(error=NotFoundError(f'space {space!r} not found'))
            result[space] = info
        return result


class FakeUnit:
    """A unit whose addresses can change between lookups.

    ``public`` and ``private`` may be callables, which lets a test make an
    address appear only after a number of polls.
    """

    def __init__(
        self,
        name: str,
        application: FakeApplication,
        *,
        addresses: Sequence[SpaceAddress] = (),
        public: AddressSource = None,
        private: AddressSource = None,
        machine: Optional[FakeMachine] = None,
    ):
        self.name = name
        self.application_name = application.name
        self._application = application
        self.addresses: List[SpaceAddress] = list(addresses)
        self.public = public
        self.private = private
        self.machine = machine
        self.addresses_error: Optional[Exception] = None

    def should_be_assigned(self) -> bool:
        return self.machine is not None

    def application(self) -> FakeApplication:
        return self._application

    def assigned_machine(self) -> FakeMachine:
        if self.machine is None:
            raise StateError(f'unit {self.name!r} is not assigned to a machine')
        return self.machine

    def all_addresses(self) -> List[SpaceAddress]:
        if self.addresses_error is not None:
            raise self.addresses_error
        return list(self.addresses)

    @staticmethod
    def _resolve(source: AddressSource, kind: str) -> SpaceAddress:
        address = source() if callable(source) else source
        if address is None:
            raise NoAddressError(kind)
        return address

    def public_address(self) -> SpaceAddress:
        return self._resolve(self.public, 'public')

    def private_address(self) -> SpaceAddress:
        return self._resolve(self.private, 'private')


@dataclasses.dataclass(frozen=True, kw_only=True)
class FakeRelation:
    """A relation between two applications."""

    id: int
    endpoints: Tuple[Endpoint, ...]
    remote_application_name: Optional[str] = None
    cross_model: bool = False

    @property
    def key(self) -> str:
        return ' '.join(f'{e.application_name}:{e.name}' for e in self.endpoints)

    def endpoint(self, application_name: str) -> Endpoint:
        for ep in self.endpoints:
            if ep.application_name == application_name:
                return ep
        raise NotFoundError(f'application {application_name!r} is not in relation {self.key!r}')

    def remote_application(self) -> Tuple[Optional[str], bool]:
        return self.remote_application_name, self.cross_model


class FakeState:
    """An in-memory entity store."""

    def __init__(self, model_config: Optional[Mapping[str, Any]] = None):
        self.config: Dict[str, Any] = dict(model_config or {})
        self.applications: Dict[str, FakeApplication] = {}
        self.units: Dict[str, FakeUnit] = {}
        self.relations: Dict[int, FakeRelation] = {}
        self.egress_networks: Dict[str, List[str]] = {}

    def add_application(
        self,
        name: str,
        bindings: Optional[Mapping[str, str]] = None,
        config: Optional[Mapping[str, Any]] = None,
    ) -> FakeApplication:
        app = FakeApplication(name, bindings, config)
        self.applications[name] = app
        return app

    def add_unit(self, name: str, application: FakeApplication, **kwargs: Any) -> FakeUnit:
        unit = FakeUnit(name, application, **kwargs)
        self.units[name] = unit
        return unit

    def add_relation(
        self,
        relation_id: int,
        local: Tuple[str, str],
        remote: Tuple[str, str],
        *,
        cross_model: bool = False,
        egress: Optional[List[str]] = None,
    ) -> FakeRelation:
        """Add a relation between (application, endpoint) pairs.

        Args:
            relation_id: the relation's ID.
            local: the local application and endpoint names.
            remote: the remote application and endpoint names.
            cross_model: whether the remote application lives in another model.
            egress: the relation's egress override, if it has one.
        """
        rel = FakeRelation(
            id=relation_id,
            endpoints=(
                Endpoint(application_name=local[0], name=local[1]),
                Endpoint(application_name=remote[0], name=remote[1]),
            ),
            remote_application_name=remote[0] if cross_model else None,
            cross_model=cross_model,
        )
        self.relations[relation_id] = rel
        if egress is not None:
            self.egress_networks[rel.key] = list(egress)
        return rel

    def unit(self, name: str) -> FakeUnit:
        try:
            return self.units[name]
        except KeyError:
            raise NotFoundError(f'unit {name!r} not found') from None

    def relation(self, relation_id: int) -> FakeRelation:
        try:
            return self.relations[relation_id]
        except KeyError:
            raise NotFoundError(f'relation {relation_id} not found') from None

    def relation_egress_networks(self, relation_key: str) -> List[str]:
        try:
            return list(self.egress_networks[relation_key])
        except KeyError:
            raise NotFoundError(f'egress networks for relation {relation_key!r}') from None

    def model_config(self) -> Mapping[str, Any]:
        return dict(self.config)
