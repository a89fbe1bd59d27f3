"""Core infrastructure package for shared application functionality.

This package provides the foundational components used across all layers
of the StoreConfig service:

- **config**: Centralized configuration management with environment support
- **context**: Operation context and correlation ID management
- **exceptions**: Structured exception hierarchy with error codes
- **logging**: Loguru setup with console and JSON formatters
- **types**: Type aliases for better code clarity
"""
