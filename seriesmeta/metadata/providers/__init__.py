"""
Concrete metadata providers, one subpackage per external catalog source.
"""
