"""Stateless helpers shared across pipeline stages."""
