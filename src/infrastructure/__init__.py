"""Infrastructure layer: adapters for the ports declared by the domain.

Key responsibilities:
- **Repository adapters**: Implementations of the domain repository ports
- **memory**: Process-local storage used by tests and local runs

The infrastructure layer follows the Dependency Inversion Principle,
implementing interfaces defined by the domain layer to maintain proper
architectural boundaries.
"""
