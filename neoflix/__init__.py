"""Neoflix authentication API."""
