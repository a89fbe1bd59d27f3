"""Application layer: use cases over the domain aggregates.

Use cases load aggregates through repository ports, run one operation,
persist the result and translate every outcome (including domain
errors) into a ``ServiceResponse`` envelope.
"""
