"""NiceGUI interface - thin visualization layer for document chats.

Responsibilities:
    - Chat list with selection, new chat and delete
    - Rendering of the reconciled message view (pending, failed, retry)
    - PDF upload and question input

Contains no reconciliation logic. Delegates every intent to the session
reconciler and re-renders on its change notifications.
"""
