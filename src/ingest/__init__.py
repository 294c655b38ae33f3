"""Transcript ingestion.

This package parses plain-text IRC transcripts line by line, resolves
senders and buffers through the identity cache, and drives conversion.
"""
