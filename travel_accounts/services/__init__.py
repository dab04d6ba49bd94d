"""Adapters for the external services the workflows depend on."""
