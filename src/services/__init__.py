"""Pure computation services.

Every function here takes an immutable snapshot (or slices of one) plus an
explicit `today` and returns freshly built models; none of them perform I/O.
"""
