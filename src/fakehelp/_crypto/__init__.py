"""Hashing and request signing helpers for the Comlink API."""
