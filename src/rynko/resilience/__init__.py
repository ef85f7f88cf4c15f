"""Resilience patterns used by the HTTP transport."""
