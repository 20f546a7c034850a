"""Searchspot — Search-query gateway for OpenSearch-backed resources."""

__version__ = "0.16.0"
