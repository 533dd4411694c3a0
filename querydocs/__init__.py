"""QueryDocs - client for chatting with uploaded PDF documents.

Combines httpx for the REST client, Pydantic for boundary validation,
NiceGUI for the interface and FastAPI for an in-memory development backend.

Components:
    - session: Chat session reconciler (active chat, message view, retries)
    - client: Typed async client for the remote chat service
    - models: Data model and wire schemas
    - parsing: PDF validation before upload
    - ui: Web interface for chat interactions
    - api: Development backend implementing the service contract
"""

__version__ = "0.1.0"
