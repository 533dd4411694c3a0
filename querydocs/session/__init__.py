"""Client-side chat session state.

Reconciles server history, optimistic sends and assistant replies into one
ordered message list for the active chat, discarding responses that arrive
after the user has moved to another chat.
"""

from querydocs.session.reconciler import ChatSessionReconciler, SessionInvariantError

__all__ = ["ChatSessionReconciler", "SessionInvariantError"]
