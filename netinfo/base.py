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

"""Resolution of network information shared by all substrates."""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from . import params
from .config import ModelConfig
from .errors import NetInfoError, NotFoundError, NotValidError, StateError
from .network import (
    Scope,
    SpaceAddress,
    dedup_interface_addresses,
    dedup_ordered,
    sort_addresses,
    to_cidr,
)
from .retry import RetryPolicy, poll_for_address
from .state import Application, Relation, State, Unit

logger = logging.getLogger(__name__)


class NetworkInfo(ABC):
    """Answers network-info requests for a single unit.

    Use :func:`new_network_info` to get the implementation matching the
    unit's placement.
    """

    @abstractmethod
    def process_api_request(self, args: params.NetworkInfoParams) -> params.NetworkInfoResults:
        """Resolve the network information of the requested endpoints.

        Every requested endpoint gets exactly one result, which carries an
        error if the endpoint is not bound.

        Raises:
            StateError: if the entity store fails; no results are returned.
            FormatError: if an address cannot be formatted as a CIDR.
        """

    @abstractmethod
    def networks_for_relation(
        self, endpoint: str, relation: Relation, poll_addresses: bool
    ) -> Tuple[str, List[SpaceAddress], List[str]]:
        """Return the bound space, ingress addresses, and egress subnets of a relation."""


class NetworkInfoBase:
    """Binding, egress, and relation logic shared by the substrate variants.

    The bindings and the model's default egress subnets are captured once, when
    the instance is created, and reused for every request it processes.
    """

    def __init__(self, state: State, unit: Unit, retry_policy: Optional[RetryPolicy] = None):
        self.state = state
        self.unit = unit
        self.retry_policy = retry_policy if retry_policy is not None else RetryPolicy()
        self.app: Application = unit.application()
        self.bindings: Dict[str, str] = dict(self.app.endpoint_bindings())
        self.default_egress: List[str] = self._model_egress_subnets()

    def _model_egress_subnets(self) -> List[str]:
        try:
            cfg = ModelConfig.from_dict(self.state.model_config())
        except ValueError as e:
            raise StateError(f'invalid model config: {e}') from e
        return cfg.egress_subnets

    def validate_endpoints(
        self, endpoints: Iterable[str]
    ) -> Tuple[Dict[str, str], Dict[str, List[str]], Dict[str, params.NetworkInfoResult]]:
        """Split the requested endpoints into bound ones and invalid ones.

        Returns:
            The bound space of each valid endpoint, the initial egress subnets
            of every endpoint (the model default), and error results for the
            endpoints that are not bound.
        """
        bindings: Dict[str, str] = {}
        egress: Dict[str, List[str]] = {}
        errors: Dict[str, params.NetworkInfoResult] = {}
        for endpoint in endpoints:
            space = self.bindings.get(endpoint)
            if space is not None:
                bindings[endpoint] = space
            else:
                err = NotValidError(f"binding name {endpoint!r} not defined by the unit's charm")
                errors[endpoint] = params.NetworkInfoResult(error=params.Error.from_exception(err))
            egress[endpoint] = list(self.default_egress)
        return bindings, egress, errors

    def relation_and_endpoint_name(self, relation_id: int) -> Tuple[Relation, str]:
        """Return the relation with the given ID and the name of this unit's endpoint in it."""
        rel = self.state.relation(relation_id)
        endpoint = rel.endpoint(self.unit.application_name)
        return rel, endpoint.name

    def relation_egress_subnets(self, rel: Relation) -> List[str]:
        """Return the egress override of the relation, or the model default if it has none.

        An override that is present but empty is returned as is, so that egress
        is then derived from the ingress addresses.
        """
        try:
            egress = self.state.relation_egress_networks(rel.key)
        except NotFoundError:
            return list(self.default_egress)
        return list(egress)

    def poll_for_address(self, fetch: Callable[[], SpaceAddress]) -> SpaceAddress:
        return poll_for_address(fetch, self.retry_policy)

    def maybe_unit_address(self, rel: Relation) -> List[SpaceAddress]:
        """Return the unit's address if the relation is cross-model.

        The public address is preferred, but the private address is used if the
        public one does not appear within the polling window. Neither being
        available is not an error.
        """
        _, cross_model = rel.remote_application()
        if not cross_model:
            return []

        try:
            address = self.poll_for_address(self.unit.public_address)
        except NetInfoError as e:
            logger.warning(
                'no public address for unit %r in cross model relation %r, '
                'will use private address: %s', self.unit.name, rel.key, e)
        else:
            if address.value:
                return [address]

        try:
            address = self.poll_for_address(self.unit.private_address)
        except NetInfoError as e:
            logger.warning('no private address for unit %r in relation %r: %s',
                           self.unit.name, rel.key, e)
        else:
            if address.value:
                return [address]

        return []

    def relation_networks(
        self, rel: Relation, poll_addresses: bool
    ) -> Tuple[List[SpaceAddress], List[str]]:
        """Return the ingress addresses and egress subnets for a relation.

        Ingress addresses are sorted by scope. Without an egress override or a
        model default, egress is the CIDR of the most preferred ingress address.
        """
        egress = self.relation_egress_subnets(rel)

        ingress: List[SpaceAddress] = []
        if poll_addresses:
            ingress = self.maybe_unit_address(rel)

        if not ingress:
            try:
                addrs = self.unit.all_addresses()
            except StateError as e:
                logger.warning('no service address for unit %r in relation %r: %s',
                               self.unit.name, rel.key, e)
            else:
                ingress = [a for a in addrs if a.scope is not Scope.MACHINE_LOCAL]

        ingress = sort_addresses(ingress)

        if not egress and ingress:
            egress = [to_cidr(ingress[0])]
        return ingress, egress


def dedup_network_info_results(info: params.NetworkInfoResults) -> params.NetworkInfoResults:
    """Remove later duplicates from every list of every successful result."""
    results: Dict[str, params.NetworkInfoResult] = {}
    for endpoint, res in info.results.items():
        if res.error is not None:
            results[endpoint] = res
            continue
        results[endpoint] = dataclasses.replace(
            res,
            ingress_addresses=dedup_ordered(res.ingress_addresses),
            egress_subnets=dedup_ordered(res.egress_subnets),
            info=[
                dataclasses.replace(i, addresses=dedup_interface_addresses(i.addresses))
                for i in res.info
            ],
        )
    return params.NetworkInfoResults(results=results)


def new_network_info(
    state: State, unit_name: str, retry_policy: Optional[RetryPolicy] = None
) -> NetworkInfo:
    """Return the network-info processor for the named unit.

    Units placed on machines get their addresses from the machine's network
    devices; other units get them from their cluster service.
    """
    # Imported here to avoid a cycle: the variants build on NetworkInfoBase.
    from .caas import NetworkInfoCAAS
    from .iaas import NetworkInfoIAAS

    unit = state.unit(unit_name)
    base = NetworkInfoBase(state, unit, retry_policy)
    if unit.should_be_assigned():
        return NetworkInfoIAAS(base)
    return NetworkInfoCAAS(base)
