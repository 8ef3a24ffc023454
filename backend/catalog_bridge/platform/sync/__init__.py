"""Event-to-export pipeline: resolver, dispatcher and router."""
