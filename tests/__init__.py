"""Test package for the chat session engine.

Unit tests cover isolated logic; integration tests drive the orchestrator,
the document workflows and the proxy end to end over in-process transports.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end workflow tests

Upstream services are replaced by httpx.MockTransport; the proxy is exercised
through httpx.ASGITransport. Leverages pytest with pytest-check for soft
assertions.
"""
