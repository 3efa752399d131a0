"""University ERP backend — course catalog, registration, grading, timetable.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
