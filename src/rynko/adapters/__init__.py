"""Adapters – transports to the Rynko API."""
