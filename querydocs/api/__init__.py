"""Development backend for the QueryDocs chat service.

In-memory FastAPI implementation of the REST contract the client consumes.
Used for local runs and as the server side of integration tests.

Endpoints (under /api):
    - /chat/list, /chat/create, /chat/{id}/messages, DELETE /chat/{id}
    - /pdf/upload, /pdf/ask
"""

from querydocs.api.app import app, create_app
from querydocs.api.store import ChatStore

__all__ = ["ChatStore", "app", "create_app"]
