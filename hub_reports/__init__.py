"""
Hub Reports - read-only report modules built on the hub kernel.

Report modules never write; they compose kernel selectors with pure stage
functions.
"""
