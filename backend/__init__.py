"""
Runtime wiring for workout tracking: settings and the composition root.
"""
