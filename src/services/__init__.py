"""Services package - Business logic layer for Order Timeline.

Architecture:
- timeline: Pure lifecycle engine (stage catalog, note log codec,
  task-completion oracle, override store, timeline builder, status
  transition operator). No I/O.
- order_timeline_service: Storage boundary; reads orders into snapshots,
  runs the engine and persists the result.
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured operation logging
"""

from . import database, exceptions, order_timeline_service

__all__ = [
    "database",
    "exceptions",
    "order_timeline_service",
]
