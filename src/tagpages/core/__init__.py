"""Shared primitives: errors, logging, settings and slugs."""
