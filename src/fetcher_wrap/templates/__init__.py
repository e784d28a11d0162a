"""
Wrapper templates shipped with the package.
"""
