"""
Use cases for the newsdesk API.

Each service module orchestrates repositories/adapters (collection stores,
remote feeds, token signing). Routers call these services instead of touching
the JSON files or the jwt library directly.
"""
