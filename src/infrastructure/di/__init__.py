"""Dependency injection container."""
