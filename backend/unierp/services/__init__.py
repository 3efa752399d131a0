"""Services Layer — async shell around the pure core.

Invariants:
    - Services own the AsyncSession for the request; routes never issue queries
    - Decisions delegated to core/ pure functions; services only fetch and persist

Design Decisions:
    - One service class per resource area (catalog, enrollment) plus the
      RegistrationValidator and its repository
"""
