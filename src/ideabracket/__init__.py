"""
ideabracket - Idea Tournament Bracket Engine

Runs single-elimination tournaments between ideas: seeds participants,
builds the bracket, resolves byes, records winners and moves the
tournament round by round.

Main components:
- bracket: the pure bracket engine
- storage: participant and match stores (in-memory and SQL)
- db: SQLAlchemy models and session management
- services: locked load/mutate/save operations for applications
"""

__version__ = "0.1.0"
