"""Base adapter interface — Abstract class for search engine connectors."""

from searchspot.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter

__all__ = ["AdapterHealth", "RawResults", "SearchAdapter"]
