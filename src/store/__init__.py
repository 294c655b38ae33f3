"""Storage layer.

This package defines the store interface consumed by ingestion and its
SQLite implementation holding networks, buffers, senders, and log rows.
"""
