"""
Infrastructure Layer

Contains all external dependencies and implementations:
- Configuration management
- Logging infrastructure
- Database models and order stores
- Catalog and composed-menu loading
- Ticket printer client
"""
