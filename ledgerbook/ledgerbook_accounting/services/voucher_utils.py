# ledgerbook_accounting/services/voucher_utils.py

import logging
import random
from datetime import date
from typing import Optional

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

VOUCHER_PREFIX = getattr(settings, 'LEDGERBOOK_VOUCHER_PREFIX', 'VCH')
VOUCHER_SUFFIX_MIN = 1000
VOUCHER_SUFFIX_MAX = 9999
MAX_VOUCHER_ATTEMPTS = getattr(settings, 'LEDGERBOOK_VOUCHER_ATTEMPTS', 10)


def generate_voucher_number(on_date: Optional[date] = None) -> str:
    """
    Builds a candidate voucher number: `<prefix>-YYMMDD-NNNN`.

    The suffix is random, so candidates can collide; uniqueness is enforced by
    the unique index on `Transaction.voucher_number` and the caller retries.

    Args:
        on_date: Date stamped into the number. Defaults to today's local date.

    Returns:
        A candidate voucher number such as 'VCH-260315-4821'.
    """
    stamp = (on_date or timezone.localdate()).strftime('%y%m%d')
    suffix = random.randint(VOUCHER_SUFFIX_MIN, VOUCHER_SUFFIX_MAX)
    return f"{VOUCHER_PREFIX}-{stamp}-{suffix}"
