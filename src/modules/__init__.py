"""Business modules for the User Auth API.

Each module is self-contained with its own schemas, services, and
domain logic.
"""
