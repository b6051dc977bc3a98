"""
Core infrastructure: configuration, logging, dependency container and auth.
"""
