"""
Host-side engine pieces.

The core (`geo`, `labels`, `selection`, `markers`) never projects anything
itself; this package holds what a host needs around it: configuration, the
projection-service contract, a reference Web Mercator projection, and the
glue that turns markers into label/touch candidates.
"""
