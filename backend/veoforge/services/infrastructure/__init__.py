"""Upstream clients and job orchestration."""
