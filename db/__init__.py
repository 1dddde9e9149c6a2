"""
db/ - Database Layer
====================
Owns the PostgreSQL connection pool and the schema bootstrap.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
