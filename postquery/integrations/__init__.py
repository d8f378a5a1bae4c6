"""Integrations with external storage backends."""
