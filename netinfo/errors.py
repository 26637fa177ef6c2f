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

"""Exceptions raised while resolving network information."""

from __future__ import annotations


class NetInfoError(Exception):
    """Base class of the errors raised by this package."""

    code: str = ''
    """Error code reported to the agent when this error is attached to a result."""

    def __repr__(self):
        return f'<{type(self).__module__}.{type(self).__name__} {self.args}>'


class StateError(NetInfoError):
    """Raised when the entity store fails to answer a query."""


class NotFoundError(StateError):
    """Raised when an entity, or an optional record such as an egress override, is absent."""

    code = 'not found'


class NoAddressError(NetInfoError):
    """Raised when a unit address has not been assigned yet.

    This is the only error the address poller retries on.
    """

    kind: str
    """The kind of address that was requested, for example 'public'."""

    def __init__(self, kind: str):
        super().__init__(f'no {kind} address')
        self.kind = kind


class NotValidError(NetInfoError):
    """Raised when a request names something the unit does not declare."""

    code = 'not valid'


class FormatError(NetInfoError, ValueError):
    """Raised when a value cannot be formatted as a network address range."""
