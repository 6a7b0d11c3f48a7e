"""Resource cache layer.

This package owns every cached resource value. Nothing outside it may
write a cached value; mutations only ask it to invalidate a key.
"""
