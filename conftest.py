# Ensure tests import the package from this checkout even when it is not installed.
import os
import sys

import pytest

SERVICE_ROOT = os.path.dirname(__file__)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from alias_proxy.config import HostRule, ProxyConfig, Settings  # noqa: E402
from alias_proxy.utils_tests.upstream import MockUpstream  # noqa: E402


@pytest.fixture
def proxy_config():
    """A single rule mapping origin.example to alias.example, aliases served over https."""
    return ProxyConfig(
        host_rules=(HostRule(origin="origin.example", alias="alias.example"),),
        alias_uses_https=True,
        settings=Settings(address="127.0.0.1:8080"),
    )


@pytest.fixture
def upstream():
    """Mock origin server; pass ``upstream.transport`` to the app or forwarder."""
    return MockUpstream()
