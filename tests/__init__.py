"""
Test suite for ecoatlas

Unit tests for the fetch client, table building, continent aggregation,
correlation, geography, panels, session lifecycle and CLI. No test makes
a real HTTP call.
"""
