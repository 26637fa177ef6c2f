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

"""Network information for units placed on machines."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from . import params
from .base import NetworkInfo, NetworkInfoBase, dedup_network_info_results
from .network import (
    ALPHA_SPACE_ID,
    SpaceAddress,
    sort_addresses,
    space_addresses_from_network_info,
    to_cidr,
)
from .state import Relation

logger = logging.getLogger(__name__)


class NetworkInfoIAAS(NetworkInfo):
    """Network information for a unit whose addresses come from its machine's devices."""

    def __init__(self, base: NetworkInfoBase):
        self.base = base

    def process_api_request(self, args: params.NetworkInfoParams) -> params.NetworkInfoResults:
        """Handle a request for the network information of some endpoints."""
        bindings, endpoint_egress, results = self.base.validate_endpoints(args.endpoints)

        endpoint_ingress: Dict[str, List[SpaceAddress]] = {}
        if args.relation_id is not None:
            rel, endpoint = self.base.relation_and_endpoint_name(args.relation_id)
            _, ingress, egress = self.networks_for_relation(endpoint, rel, True)
            if egress:
                endpoint_egress[endpoint] = egress
            endpoint_ingress[endpoint] = ingress

        spaces = sorted(set(bindings.values()))
        machine = self.base.unit.assigned_machine()
        network_infos = machine.network_info_for_spaces(spaces) if spaces else {}

        for endpoint, space in bindings.items():
            space_info = network_infos.get(space)
            if space_info is None:
                logger.warning('no network info for space %r of endpoint %r', space, endpoint)
                results[endpoint] = params.NetworkInfoResult()
                continue
            if space_info.error is not None:
                results[endpoint] = params.NetworkInfoResult(
                    error=params.Error.from_exception(space_info.error))
                continue

            ingress = [a.value for a in endpoint_ingress.get(endpoint, [])]
            if not ingress:
                addrs = space_addresses_from_network_info(space_info.network_infos)
                ingress = [a.value for a in sort_addresses(addrs)]

            egress = endpoint_egress.get(endpoint, [])
            if not egress and ingress:
                egress = [to_cidr(ingress[0])]

            results[endpoint] = params.NetworkInfoResult(
                info=list(space_info.network_infos),
                ingress_addresses=ingress,
                egress_subnets=egress,
            )

        ordered = {endpoint: results[endpoint] for endpoint in args.endpoints}
        return dedup_network_info_results(params.NetworkInfoResults(results=ordered))

    def networks_for_relation(
        self, endpoint: str, relation: Relation, poll_addresses: bool
    ) -> Tuple[str, List[SpaceAddress], List[str]]:
        """Return the endpoint's bound space, and the ingress and egress of the relation."""
        ingress, egress = self.base.relation_networks(relation, poll_addresses)
        return self.base.bindings.get(endpoint, ALPHA_SPACE_ID), ingress, egress
