"""Unit tests for individual components in isolation.

Coverage:
    - session/: Timeline, reveal, repository, stores and export
    - client/: Answer decoding and configuration
    - documents/: Upload validation and the document set

No network. Leverages pytest-check for multiple assertions per test.
"""
