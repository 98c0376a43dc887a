"""Request pipeline helpers."""
