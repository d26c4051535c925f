"""
External service clients.
"""
