"""Unit tests for individual components in isolation.

Coverage:
    - models/: Wire schema parsing and domain translation
    - client/: Configuration validation
    - parsing/: PDF validation and inspection
    - session/: Reconciler operations with AsyncMock remotes

Uses mocks for the remote chat service.
"""
