"""Domain types for the exchange price resolution engine.

This package holds the closed enumerations (coins, provider variants) and the
protocols the resolver exposes and consumes. They carry no I/O so callers and
tests can depend on them without pulling in HTTP clients.
"""

__all__ = [
    "pricing",
]
