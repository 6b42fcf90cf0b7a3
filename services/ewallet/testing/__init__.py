"""Test support for the eWallet API: sandboxed sessions, baseline fixtures and request helpers."""

from services.ewallet.testing.conn_case import ConnCase, Fixtures, setup_fixtures, stringify_keys
from services.ewallet.testing.sandbox import Sandbox, checkout

__all__ = ["ConnCase", "Fixtures", "Sandbox", "checkout", "setup_fixtures", "stringify_keys"]
