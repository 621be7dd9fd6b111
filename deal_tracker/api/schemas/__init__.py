"""Schemas da API."""
