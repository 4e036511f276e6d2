"""Cyprus Holiday Optimizer.

Find the few vacation days that bridge weekends and public holidays
into the longest continuous breaks of the year.
"""

from bridgedays.dates import InvalidYearError
from bridgedays.holidays import compute_public_holidays, orthodox_easter
from bridgedays.optimizer import (
    FreeBlock,
    Opportunity,
    compute_free_blocks,
    compute_opportunities,
)

__all__ = [
    "FreeBlock",
    "InvalidYearError",
    "Opportunity",
    "compute_free_blocks",
    "compute_opportunities",
    "compute_public_holidays",
    "orthodox_easter",
]
