"""
Application Layer

Use cases orchestrating the domain, plus the DTOs they exchange with callers.
"""
