"""Ingestflow core — classification, rule chains, and the ingestion loop.

The core is integration-agnostic: it reaches storage only through sinks
and the broker only through an ``EventSource``.
"""
