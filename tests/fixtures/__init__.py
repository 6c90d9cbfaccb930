"""Test fixtures for the thread simulator.

This package provides reusable test fixtures:
- core: Clocks, messages, threads, environments and engines
- api: TestClient and engine fixtures for route tests
"""
