"""Integrations with external tools and services."""
