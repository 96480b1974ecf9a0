from __future__ import annotations

from datetime import date
from typing import Mapping

from ..common.validators import optional_date
from ..core.exceptions import ValidationError
from .context import RequestContext


def read_date_range(
    ctx: RequestContext,
    values: Mapping[str, str],
    *,
    default_from: date,
    default_to: date,
) -> tuple[date, date]:
    """Inclusive `date_from`/`date_to` pair from a query string or form.

    Missing values take the defaults; a malformed value is reported with a flash
    and the whole range falls back to the defaults.
    """

    try:
        date_from = optional_date(values.get("date_from"), "Start date") or default_from
        date_to = optional_date(values.get("date_to"), "End date") or default_to
    except ValidationError as e:
        ctx.flash(str(e), "warning")
        return default_from, default_to
    return date_from, date_to
