"""
Domain Layer

Business entities, value objects, domain services and repository interfaces.
"""
