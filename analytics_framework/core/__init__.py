"""Core infrastructure: configuration, constants, exceptions and logging."""
