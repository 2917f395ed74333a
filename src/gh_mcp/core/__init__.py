"""Core utilities shared by the launcher: logging, errors, credentials."""
