# Shared fixtures: an isolated EventBridge per test so registrations made by
# one test never leak into the module-level bridge used by builders.

import logging

import pytest

from chartbind.events.bridge import EventBridge
from chartbind.services.logging_service import LoggingService


@pytest.fixture
def bridge():
    return EventBridge()


@pytest.fixture
def captured_logs():
    svc = LoggingService(capacity=50)
    svc.attach()
    yield svc
    svc.detach()
    logging.getLogger("chartbind").setLevel(logging.NOTSET)
