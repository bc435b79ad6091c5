"""Fetching deployed contract code from JSON-RPC nodes."""
