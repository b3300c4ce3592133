"""Student skills and training-program certification tracker.

Single-user, single-process: repositories and the persistence layer are not
safe for concurrent mutation. Embedders serving several callers must hold
one writer lock around every repository + persistence call.
"""

__version__ = "0.1.0"
