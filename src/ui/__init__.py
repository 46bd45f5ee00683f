"""NiceGUI interface - thin visualization layer over the session engine.

Pages:
    - /: Free chat with the persisted session sidebar
    - /documents: Document library and document-grounded chat

Contains no turn logic. Sending, rollback and persistence are delegated to
the request orchestrator and the session repositories.
"""
