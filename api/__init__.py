"""
Location Resolver API package.
"""
