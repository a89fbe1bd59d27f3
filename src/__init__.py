"""StoreConfig - per-store configuration service.

Each store (tenant) owns a set of configuration aggregates. The first and
central one is the fiscal configuration: the tax regions, standard and
reduced rates, tariff fees and customs codes a store works with.

Architecture Overview:
- **Core Layer**: Configuration, logging, operation context and errors
- **Domain Layer**: Aggregates, their invariants and repository ports
- **Application Layer**: Use cases returning response envelopes
- **Infrastructure Layer**: Repository adapters

The domain layer has no dependency on the outer layers; adapters and use
cases depend on the ports it declares.
"""
