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

"""Forward log messages from the resolver to the agent's log channel."""

from __future__ import annotations

import logging
import typing

TRACE: typing.Final[int] = 5
"""The TRACE log level, which is lower than DEBUG."""

logging.addLevelName(TRACE, 'TRACE')

LogSink = typing.Callable[[str, str], None]
"""Receives a level name and a formatted message."""


class AgentLogHandler(logging.Handler):
    """A handler that sends log records to the agent's log sink."""

    def __init__(self, sink: LogSink, level: int = TRACE):
        super().__init__(level)
        self.sink = sink

    def emit(self, record: logging.LogRecord):
        """Send the specified logging record to the sink.

        This method is not used directly, but by :class:`logging.Handler`
        itself as part of the logging machinery.
        """
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        self.sink(record.levelname, message)


def setup_root_logging(sink: LogSink, debug: bool = False) -> logging.Logger:
    """Set up Python logging to forward messages to the given sink.

    By default, logging is set to DEBUG level, and messages will be filtered
    by the agent. Callers can set their own level with::

      logging.getLogger('netinfo').setLevel(logging.INFO)

    Args:
        sink: called with the level name and message of every record.
        debug: if True, write logs to stderr as well as to the sink.

    Returns:
        The root logger, with the handlers installed.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    logger.addHandler(AgentLogHandler(sink))

    if debug:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s %(levelname)-8s %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
