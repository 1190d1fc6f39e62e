"""Shared helpers for cq_harness tests."""
