"""Domain layer: aggregates, invariants and the ports they depend on.

Nothing in this package performs I/O or logs. Each aggregate lives in its
own subpackage together with its records, errors and repository port.
"""
