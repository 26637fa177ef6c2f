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

import pytest

from netinfo.errors import NoAddressError, NotFoundError, StateError
from netinfo.network import Scope, SpaceAddress
from netinfo.state import Endpoint
from netinfo.testing import FakeClock, FakeMachine, FakeState


def test_fake_clock():
    clock = FakeClock(start=10)
    clock.sleep(3)
    clock.advance(1.5)
    assert clock.time() == 14.5
    assert clock.sleeps == [3]


class TestFakeState:
    def test_lookups(self):
        state = FakeState(model_config={'egress-subnets': '10.0.0.0/8'})
        app = state.add_application('mysql', bindings={'db': '0'})
        unit = state.add_unit('mysql/0', app)
        assert state.unit('mysql/0') is unit
        assert unit.application().endpoint_bindings() == {'db': '0'}
        assert state.model_config() == {'egress-subnets': '10.0.0.0/8'}
        with pytest.raises(NotFoundError):
            state.unit('mysql/1')
        with pytest.raises(NotFoundError):
            state.relation(1)

    def test_relation(self):
        state = FakeState()
        rel = state.add_relation(
            2, ('mysql', 'db'), ('wordpress', 'database'), cross_model=True, egress=['10.0.0.0/8'])
        assert rel.key == 'mysql:db wordpress:database'
        assert rel.endpoint('mysql') == Endpoint(application_name='mysql', name='db')
        assert rel.remote_application() == ('wordpress', True)
        assert state.relation_egress_networks(rel.key) == ['10.0.0.0/8']
        with pytest.raises(NotFoundError):
            rel.endpoint('nope')

    def test_missing_egress_override(self):
        state = FakeState()
        rel = state.add_relation(2, ('mysql', 'db'), ('wordpress', 'database'))
        assert rel.remote_application() == (None, False)
        with pytest.raises(NotFoundError):
            state.relation_egress_networks(rel.key)


class TestFakeUnit:
    def test_addresses(self):
        state = FakeState()
        unit = state.add_unit('mysql/0', state.add_application('mysql'))
        with pytest.raises(NoAddressError) as excinfo:
            unit.public_address()
        assert excinfo.value.kind == 'public'

        polls = []

        def private():
            polls.append(1)
            return SpaceAddress('10.0.0.1', Scope.CLOUD_LOCAL) if len(polls) > 1 else None

        unit.private = private
        with pytest.raises(NoAddressError):
            unit.private_address()
        assert unit.private_address().value == '10.0.0.1'

    def test_machine(self):
        state = FakeState()
        unit = state.add_unit('mysql/0', state.add_application('mysql'))
        assert not unit.should_be_assigned()
        with pytest.raises(StateError):
            unit.assigned_machine()
        unit.machine = FakeMachine()
        assert unit.should_be_assigned()
        result = unit.assigned_machine().network_info_for_spaces(['1'])
        assert isinstance(result['1'].error, NotFoundError)
