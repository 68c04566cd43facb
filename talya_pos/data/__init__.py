"""
Bundled configuration data
"""
