"""
Period Arithmetic
-----------------

Calendar-aligned periods and the algorithms built on them.

Modules:
    - granularity: Granularity enum and the specificity hierarchy
    - period_calendar: Period starts, steps, ranges, overlap, keys and labels
    - gaps: Missing-period detection with a future horizon
    - merge: Records and placeholders merged into one ordered sequence
    - selection: Hierarchical candidate generation and context filtering
"""
