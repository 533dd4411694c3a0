"""Integration tests for components working together as a system.

The client talks to the real development backend through httpx's
ASGITransport; no network and no mocks for the service itself.

Coverage:
    - Every REST endpoint through ChatApiClient
    - Error envelopes and status codes surfacing as ChatApiError
    - Full reconciler flows from upload to answer, reload and delete
"""
