"""Test package for QueryDocs.

Structure:
    - unit/: Models, configuration, PDF inspection and the session reconciler
      against mocked remotes
    - integration/: Client and reconciler against the in-memory development
      backend over ASGI transport

Uses pytest with pytest-asyncio (auto mode) and pytest-check for soft
assertions. Sample PDFs are generated with pypdf inside fixtures.
"""
