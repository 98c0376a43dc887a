"""HTTP request and response types."""
