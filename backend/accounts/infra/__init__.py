"""Concrete adapters for the service ports."""
