"""HTTP layer for the chat service."""
