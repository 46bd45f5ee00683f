"""Integration tests for components working together as a system.

Coverage:
    - Chat turns through the orchestrator against a fake answering service
    - Document upload, delete and document-grounded turns
    - Proxy endpoints with real HTTP requests over ASGITransport
    - Workspace wiring with a SQLite store

The answering service and the webhooks are served by httpx.MockTransport.
"""
