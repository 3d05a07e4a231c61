"""Vicsek model of self-propelled particles in a polygonal domain."""
