"""Core dispatch, registry and lifecycle components."""
