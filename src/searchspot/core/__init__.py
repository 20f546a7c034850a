"""Core translation pipeline — filters, query builder, executor and auth gate."""
