"""
Adapter layer

Access to external collaborators (the back-office database).
Protocol based interfaces so the store can be swapped for a fake.
"""

from adapters.interfaces import (
    IJournalSource,
    ISnapshotSource,
)

__all__ = [
    "IJournalSource",
    "ISnapshotSource",
]
