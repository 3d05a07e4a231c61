"""
The MODEL layer contains pure data structures and the particle rules.
It deals with planar geometry, border interactions, the alignment rule,
ensemble statistics and snapshot I/O. It drives no simulation loop.
"""
