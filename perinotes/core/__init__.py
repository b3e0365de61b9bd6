"""Core infrastructure: logging, exceptions, paths, validation and CLI helpers."""
