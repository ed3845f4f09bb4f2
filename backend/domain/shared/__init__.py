"""
Shared Kernel - exceptions, events and value objects used by every domain.
"""
