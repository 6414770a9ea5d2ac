"""Havenly vacation-rental marketplace API."""
