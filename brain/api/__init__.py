"""
HTTP surface for the brain dispatcher.
"""
