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

"""Request and result types exchanged with the agent."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Dict, List, Optional, TypedDict

from .network import InterfaceAddress, InterfaceInfo

if TYPE_CHECKING:
    from typing_extensions import NotRequired

    class _AddressDict(TypedDict, total=False):
        value: str
        address: str  # older agents
        cidr: str

    _BindAddressDict = TypedDict(
        '_BindAddressDict',
        {
            'mac-address': NotRequired[str],
            'interface-name': NotRequired[str],
            'addresses': NotRequired[List[_AddressDict]],
        },
    )

    class _ErrorDict(TypedDict):
        message: str
        code: str

    _NetworkInfoResultDict = TypedDict(
        '_NetworkInfoResultDict',
        {
            'bind-addresses': NotRequired[List[_BindAddressDict]],
            'ingress-addresses': NotRequired[List[str]],
            'egress-subnets': NotRequired[List[str]],
            'error': NotRequired[_ErrorDict],
        },
    )


@dataclasses.dataclass(frozen=True, kw_only=True)
class Error:
    """An error attached to a single result."""

    message: str
    code: str = ''

    @classmethod
    def from_exception(cls, err: Exception) -> Error:
        return cls(message=str(err), code=getattr(err, 'code', ''))

    def to_dict(self) -> _ErrorDict:
        return {'message': self.message, 'code': self.code}


@dataclasses.dataclass(frozen=True, kw_only=True)
class NetworkInfoParams:
    """A request for the network information of some of a unit's endpoints."""

    unit: str
    endpoints: List[str] = dataclasses.field(default_factory=list)
    relation_id: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> NetworkInfoParams:
        relation_id = d.get('relation-id')
        return cls(
            unit=d['unit'],
            endpoints=list(d.get('endpoints') or []),
            relation_id=int(relation_id) if relation_id is not None else None,
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class NetworkInfoResult:
    """Network information for a single endpoint, or the error resolving it."""

    info: List[InterfaceInfo] = dataclasses.field(default_factory=list)
    """Devices, and their addresses, the endpoint should bind to."""

    ingress_addresses: List[str] = dataclasses.field(default_factory=list)
    """Addresses other units should use to reach this one, most preferred first."""

    egress_subnets: List[str] = dataclasses.field(default_factory=list)
    """CIDRs that outbound traffic from this unit will appear to come from."""

    error: Optional[Error] = None

    def to_dict(self) -> _NetworkInfoResultDict:
        """Return the result in the format of ``network-get`` output."""
        if self.error is not None:
            return {'error': self.error.to_dict()}
        bind: List[_BindAddressDict] = []
        for info in self.info:
            addresses: List[_AddressDict] = [
                {'value': a.address, 'cidr': a.cidr} for a in info.addresses
            ]
            bind.append({
                'mac-address': info.mac_address,
                'interface-name': info.interface_name,
                'addresses': addresses,
            })
        return {
            'bind-addresses': bind,
            'ingress-addresses': list(self.ingress_addresses),
            'egress-subnets': list(self.egress_subnets),
        }

    @classmethod
    def from_dict(cls, d: _NetworkInfoResultDict) -> NetworkInfoResult:
        error = d.get('error')
        if error is not None:
            return cls(error=Error(message=error['message'], code=error.get('code', '')))
        info: List[InterfaceInfo] = []
        for bind in d.get('bind-addresses') or []:
            addresses = [
                InterfaceAddress(
                    address=a.get('value', a.get('address', '')), cidr=a.get('cidr', '')
                )
                for a in bind.get('addresses') or []
            ]
            info.append(
                InterfaceInfo(
                    interface_name=bind.get('interface-name', ''),
                    mac_address=bind.get('mac-address', ''),
                    addresses=addresses,
                )
            )
        return cls(
            info=info,
            ingress_addresses=list(d.get('ingress-addresses') or []),
            egress_subnets=list(d.get('egress-subnets') or []),
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class NetworkInfoResults:
    """Results keyed by endpoint name."""

    results: Dict[str, NetworkInfoResult] = dataclasses.field(default_factory=dict)

    def to_dict(self) -> Dict[str, _NetworkInfoResultDict]:
        return {name: result.to_dict() for name, result in self.results.items()}
