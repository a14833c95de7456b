"""
Accounting journal

Read-side synthesis of every financial event (sales, dues, tontine
contributions and payouts, credit repayments and disbursements, stock
replenishments) into one filterable, paginated journal.

Usage:
```python
from core.journal import JournalQuery, LedgerAggregator
from core.storage.journal_store import JournalStore

aggregator = LedgerAggregator(JournalStore(db))
result = await aggregator.get_ledger(
    JournalQuery.from_params(type_filter="ENCAISSEMENT", search="marché")
)
body = result.to_dict()
```
"""

from core.journal.aggregator import (
    JournalQuery,
    JournalQueryError,
    JournalResult,
    LedgerAggregator,
)
from core.journal.statements import FinancialStatements, FinancialStatementsBuilder
from core.journal.summary import FinancialSummary, FinancialSummaryBuilder
from core.journal.types import (
    CATEGORY_TYPES,
    TYPE_FILTER_ALL,
    JournalCategory,
    JournalTotals,
    JournalType,
    LedgerEntry,
)

__all__ = [
    "JournalQuery",
    "JournalQueryError",
    "JournalResult",
    "LedgerAggregator",
    "FinancialStatements",
    "FinancialStatementsBuilder",
    "FinancialSummary",
    "FinancialSummaryBuilder",
    "CATEGORY_TYPES",
    "TYPE_FILTER_ALL",
    "JournalCategory",
    "JournalTotals",
    "JournalType",
    "LedgerEntry",
]
