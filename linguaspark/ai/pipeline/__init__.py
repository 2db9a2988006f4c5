"""Request-scoped contracts and section content types."""
