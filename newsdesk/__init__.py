"""Backend for the by1.net site: aggregated news feed and JSON-backed collections."""
