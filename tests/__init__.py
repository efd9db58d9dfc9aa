"""
Test Suite

Contains unit tests for the exchange core.

Structure:
- tests/unit/: Tests for individual components (pair filter, nonces, query client, ...)

Venue adapters are replaced by an in-memory DummyExchange (see tests/unit/conftest.py)
and HTTP traffic by httpx.MockTransport, so no test touches the network.
"""
