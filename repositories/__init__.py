"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific domain entity.
Repositories receive a `Database` handle, return domain model objects, and
report storage failures as False/None instead of raising.
"""
