"""
Persistence adapters.

Services depend on the CollectionStore interface (load/save) rather than on
the JSON files, so tests can hand them an in-memory store.
"""
