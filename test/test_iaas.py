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

import logging

import pytest

from netinfo import (
    ALPHA_SPACE_ID,
    InterfaceAddress,
    InterfaceInfo,
    NetworkInfoIAAS,
    RetryPolicy,
    Scope,
    SpaceAddress,
    StateError,
    new_network_info,
)
from netinfo.params import NetworkInfoParams, NetworkInfoResult
from netinfo.state import MachineNetworkInfoResult
from netinfo.testing import FakeClock, FakeMachine, FakeState, FakeUnit

UNIT = 'wordpress/0'
SPACE_PUBLIC = '1'
SPACE_INTERNAL = '2'

ETH0 = InterfaceInfo(
    interface_name='eth0',
    mac_address='00:16:3e:00:00:01',
    addresses=[InterfaceAddress(address='10.0.0.5', cidr='10.0.0.0/24')],
)
FAN = InterfaceInfo(
    interface_name='fan-252',
    mac_address='00:16:3e:00:00:02',
    addresses=[InterfaceAddress(address='252.0.0.5', cidr='252.0.0.0/8')],
)
ETH1 = InterfaceInfo(
    interface_name='eth1',
    addresses=[
        InterfaceAddress(address='35.1.1.1', cidr='35.1.1.0/24'),
        InterfaceAddress(address='35.1.1.1', cidr='35.1.1.0/24'),
    ],
)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def machine():
    return FakeMachine({
        SPACE_INTERNAL: MachineNetworkInfoResult(network_infos=[FAN, ETH0]),
        SPACE_PUBLIC: MachineNetworkInfoResult(network_infos=[ETH1]),
    })


@pytest.fixture
def state():
    return FakeState()


@pytest.fixture
def unit(state: FakeState, machine: FakeMachine):
    app = state.add_application('wordpress', bindings={
        'website': SPACE_PUBLIC,
        'db': SPACE_INTERNAL,
        'cache': ALPHA_SPACE_ID,
    })
    return state.add_unit(UNIT, app, machine=machine, addresses=[
        SpaceAddress('10.0.0.5', Scope.CLOUD_LOCAL),
        SpaceAddress('35.1.1.1', Scope.PUBLIC),
    ])


def make_info(state: FakeState, clock: FakeClock) -> NetworkInfoIAAS:
    info = new_network_info(state, UNIT, RetryPolicy(clock=clock))
    assert isinstance(info, NetworkInfoIAAS)
    return info


def test_per_space_devices(
    state: FakeState, unit: FakeUnit, machine: FakeMachine, clock: FakeClock
):
    results = make_info(state, clock).process_api_request(
        NetworkInfoParams(unit=UNIT, endpoints=['db', 'website'])).results

    db = results['db']
    assert db.info == [FAN, ETH0]
    # The fan address is listed first by the machine, but sorts last.
    assert db.ingress_addresses == ['10.0.0.5', '252.0.0.5']
    assert db.egress_subnets == ['10.0.0.5/32']

    website = results['website']
    assert website.info[0].addresses == [InterfaceAddress(address='35.1.1.1', cidr='35.1.1.0/24')]
    assert website.ingress_addresses == ['35.1.1.1']
    assert machine.requested_spaces == [[SPACE_PUBLIC, SPACE_INTERNAL]]


def test_space_error_is_per_endpoint(state: FakeState, unit: FakeUnit, clock: FakeClock):
    results = make_info(state, clock).process_api_request(
        NetworkInfoParams(unit=UNIT, endpoints=['cache', 'db', 'nope'])).results
    err = results['cache'].error
    assert err is not None
    assert err.code == 'not found'
    assert results['db'].error is None
    assert results['nope'].error is not None
    assert results['nope'].error.code == 'not valid'


def test_model_egress(state: FakeState, unit: FakeUnit, clock: FakeClock):
    state.config['egress-subnets'] = ['192.168.0.0/16']
    res = make_info(state, clock).process_api_request(
        NetworkInfoParams(unit=UNIT, endpoints=['db'])).results['db']
    assert res.egress_subnets == ['192.168.0.0/16']


def test_relation_overrides_endpoint(state: FakeState, unit: FakeUnit, clock: FakeClock):
    state.add_relation(7, ('wordpress', 'db'), ('mysql', 'server'), egress=['10.9.0.0/16'])
    results = make_info(state, clock).process_api_request(
        NetworkInfoParams(unit=UNIT, endpoints=['db', 'website'], relation_id=7)).results
    assert results['db'].info == [FAN, ETH0]
    assert results['db'].ingress_addresses == ['35.1.1.1', '10.0.0.5']
    assert results['db'].egress_subnets == ['10.9.0.0/16']
    assert results['website'].egress_subnets == ['35.1.1.1/32']


def test_cross_model_relation_polls(state: FakeState, unit: FakeUnit, clock: FakeClock):
    unit.public = SpaceAddress('35.1.1.1', Scope.PUBLIC)
    state.add_relation(7, ('wordpress', 'db'), ('mysql', 'server'), cross_model=True)
    res = make_info(state, clock).process_api_request(
        NetworkInfoParams(unit=UNIT, endpoints=['db'], relation_id=7)).results['db']
    assert res.ingress_addresses == ['35.1.1.1']
    assert res.egress_subnets == ['35.1.1.1/32']


def test_networks_for_relation_bound_space(state: FakeState, unit: FakeUnit, clock: FakeClock):
    rel = state.add_relation(7, ('wordpress', 'db'), ('mysql', 'server'))
    info = make_info(state, clock)
    space, _, _ = info.networks_for_relation('db', rel, True)
    assert space == SPACE_INTERNAL
    space, _, _ = info.networks_for_relation('unbound', rel, True)
    assert space == ALPHA_SPACE_ID


def test_machine_failure_fails_request(state: FakeState, unit: FakeUnit, clock: FakeClock):
    info = make_info(state, clock)
    unit.machine = None
    with pytest.raises(StateError):
        info.process_api_request(NetworkInfoParams(unit=UNIT, endpoints=['db']))


def test_no_bound_endpoints_skips_machine(
    state: FakeState, unit: FakeUnit, machine: FakeMachine, clock: FakeClock
):
    results = make_info(state, clock).process_api_request(
        NetworkInfoParams(unit=UNIT, endpoints=['nope'])).results
    assert list(results) == ['nope']
    assert machine.requested_spaces == []


class PartialMachine(FakeMachine):
    """A machine that leaves spaces it knows nothing about out of its answer."""

    def network_info_for_spaces(self, spaces):
        result = super().network_info_for_spaces(spaces)
        return {space: info for space, info in result.items() if info.error is None}


def test_space_missing_from_machine_answer(
    state: FakeState, unit: FakeUnit, clock: FakeClock, caplog: pytest.LogCaptureFixture
):
    unit.machine = PartialMachine({SPACE_INTERNAL: MachineNetworkInfoResult(network_infos=[ETH0])})
    with caplog.at_level(logging.WARNING, logger='netinfo.iaas'):
        results = make_info(state, clock).process_api_request(
            NetworkInfoParams(unit=UNIT, endpoints=['website', 'db'])).results
    assert list(results) == ['website', 'db']
    assert results['website'] == NetworkInfoResult()
    assert results['website'].error is None
    assert results['db'].ingress_addresses == ['10.0.0.5']
    assert "no network info for space '1' of endpoint 'website'" in caplog.text
