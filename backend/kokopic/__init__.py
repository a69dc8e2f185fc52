"""Kokopic photo request service backend."""
