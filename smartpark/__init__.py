"""
SmartPark car wash sales management.
"""
__version__ = "2.0.0"
