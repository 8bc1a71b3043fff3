"""Business logic services.

Services are called by routes and receive backend handles explicitly.
"""
