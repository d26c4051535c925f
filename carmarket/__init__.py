"""
Car marketplace REST API.
"""
