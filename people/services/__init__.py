"""Integrations with the record store and the group service."""
