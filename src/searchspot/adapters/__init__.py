"""Search engine adapter layer — Connectors the executor talks to.

Built-in adapters:
  - opensearch: OpenSearch v2+ (Elasticsearch-compatible query DSL)

Implement ``SearchAdapter`` to connect another engine.
"""
