"""
Fenetre de recalcul dans le calendrier civil operationnel.

Le job ne finalise que des jours completement ecoules : la fin de fenetre est
toujours "hier" dans le fuseau configure. Toute l'arithmetique se fait sur des
dates (annee/mois/jour), jamais sur des instants.
"""
import math
from dataclasses import dataclass
from datetime import date as date_type, datetime, timedelta, timezone
from typing import Any, List, Optional
from zoneinfo import ZoneInfo

ROLLING_WINDOW_DAYS = 14
DEFAULT_BACKFILL_DAYS = 30


@dataclass(frozen=True)
class RecalcWindow:
    """Plage cible [start_date, end_date] et debut de l'historique de charge."""
    start_date: date_type
    end_date: date_type
    load_start: date_type

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def dates(self) -> List[date_type]:
        return [self.start_date + timedelta(days=i) for i in range(self.days)]


def coerce_backfill_days(
    value: Any,
    default: int = DEFAULT_BACKFILL_DAYS,
    maximum: Optional[int] = None,
) -> int:
    """Normalise un backfill optionnel sans jamais lever d'erreur.

    Valeur absente, non numerique, booleenne, negative, non finie ou hors
    des flottants -> default.
    0 est ramene a 1 jour, les decimales sont tronquees, maximum borne le tout.
    """
    if value is None or isinstance(value, bool):
        n = float(default)
    else:
        try:
            n = float(value)
        except (TypeError, ValueError, OverflowError):
            n = float(default)
        if not math.isfinite(n) or n < 0:
            n = float(default)

    days = max(1, int(n))
    if maximum is not None:
        days = min(days, maximum)
    return days


def local_today(tz_name: str, now: Optional[datetime] = None) -> date_type:
    """Date civile courante dans le fuseau tz_name (now naif = UTC)."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name)).date()


def resolve_window(
    backfill_days: int,
    tz_name: str = "Asia/Tokyo",
    now: Optional[datetime] = None,
) -> RecalcWindow:
    """Calcule la fenetre cible se terminant hier (calendrier tz_name)."""
    end_date = local_today(tz_name, now) - timedelta(days=1)
    start_date = end_date - timedelta(days=max(1, backfill_days) - 1)
    load_start = start_date - timedelta(days=ROLLING_WINDOW_DAYS - 1)
    return RecalcWindow(start_date=start_date, end_date=end_date, load_start=load_start)
