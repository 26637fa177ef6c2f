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

"""Network information for units running as cluster services."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from . import params
from .base import NetworkInfo, NetworkInfoBase, dedup_network_info_results
from .config import ApplicationConfig
from .network import (
    ALPHA_SPACE_ID,
    InterfaceAddress,
    InterfaceInfo,
    Scope,
    SpaceAddress,
    sort_addresses,
    space_addresses_from_network_info,
    to_cidr,
)
from .state import Relation

logger = logging.getLogger(__name__)


class NetworkInfoCAAS(NetworkInfo):
    """Network information for a unit whose addresses are those of its cluster service.

    The substrate does not model spaces, so every endpoint resolves to the
    default space, with a single device carrying the unit's machine-local
    addresses.
    """

    def __init__(self, base: NetworkInfoBase):
        self.base = base

    def process_api_request(self, args: params.NetworkInfoParams) -> params.NetworkInfoResults:
        """Handle a request for the network information of some endpoints."""
        bindings, endpoint_egress, results = self.base.validate_endpoints(args.endpoints)

        endpoint_ingress: Dict[str, List[SpaceAddress]] = {}
        # In a relation context, the relation's network information applies to
        # the endpoint the relation uses.
        if args.relation_id is not None:
            endpoint, _, ingress, egress = self._relation_network_info(args.relation_id)
            if egress:
                endpoint_egress[endpoint] = egress
            endpoint_ingress[endpoint] = ingress

        addrs = sort_addresses(self.base.unit.all_addresses())

        # Machine-local addresses are what the workload binds to; everything
        # else is a candidate ingress address.
        interface_addrs: List[InterfaceAddress] = []
        default_ingress: List[str] = []
        for addr in addrs:
            if addr.scope is Scope.MACHINE_LOCAL:
                interface_addrs.append(InterfaceAddress(address=addr.value))
            else:
                default_ingress.append(addr.value)

        network_infos = {ALPHA_SPACE_ID: [InterfaceInfo(addresses=interface_addrs)]}

        for endpoint, space in bindings.items():
            infos = network_infos.get(space, [])

            ingress = [a.value for a in endpoint_ingress.get(endpoint, [])]
            if not ingress:
                ingress = list(default_ingress)
            if not ingress:
                logger.debug('no ingress address for %r, using its bind addresses', endpoint)
                addrs = sort_addresses(space_addresses_from_network_info(infos))
                ingress = [a.value for a in addrs]

            # Without explicit egress, default to the first ingress address,
            # matching the behaviour when there is a relation in place.
            egress = endpoint_egress.get(endpoint, [])
            if not egress and ingress:
                egress = [to_cidr(ingress[0])]

            results[endpoint] = params.NetworkInfoResult(
                info=list(infos),
                ingress_addresses=ingress,
                egress_subnets=egress,
            )

        ordered = {endpoint: results[endpoint] for endpoint in args.endpoints}
        return dedup_network_info_results(params.NetworkInfoResults(results=ordered))

    def _relation_network_info(
        self, relation_id: int
    ) -> Tuple[str, str, List[SpaceAddress], List[str]]:
        rel, endpoint = self.base.relation_and_endpoint_name(relation_id)
        cfg = ApplicationConfig(self.base.app.application_config())
        space, ingress, egress = self.networks_for_relation(
            endpoint, rel, cfg.requires_address_polling)
        return endpoint, space, ingress, egress

    def networks_for_relation(
        self, endpoint: str, relation: Relation, poll_addresses: bool
    ) -> Tuple[str, List[SpaceAddress], List[str]]:
        """Return the default space, and the ingress and egress of the relation.

        Addresses are only polled for when the service's address is assigned
        externally and the relation is cross-model.
        """
        ingress, egress = self.base.relation_networks(relation, poll_addresses)
        return ALPHA_SPACE_ID, ingress, egress
