"""Searchspot Python SDK — Client library for the Searchspot API.

Provides both async and sync clients for interacting with a Searchspot server.

Quick start::

    from searchspot.client import SearchspotClient

    client = SearchspotClient("http://localhost:3000", read_secret="...")
    page = client.search("talents", work_locations=["Berlin"], keywords="python", limit=5)
"""

from searchspot.client.client import AsyncSearchspotClient, SearchspotClient, encode_filters

__all__ = ["AsyncSearchspotClient", "SearchspotClient", "encode_filters"]
