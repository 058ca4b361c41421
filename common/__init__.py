"""Shared helpers: JSON logging setup and lenient date normalization."""
