"""Due-list queries over scheduled themes."""
from datetime import date

from revisor.models import Theme
from revisor.store import StoreSession


def due_sort_key(theme: Theme, as_of: date) -> tuple:
    """Overdue first, then earliest date, then heaviest tier, then id."""
    return (
        not theme.is_overdue(as_of),
        theme.next_review_date or date.max,
        -theme.difficulty_tier.weight,
        theme.id if theme.id is not None else 0,
    )


def sort_due(themes: list[Theme], as_of: date) -> list[Theme]:
    return sorted(themes, key=lambda t: due_sort_key(t, as_of))


def due_on_or_before(session: StoreSession, day: date) -> list[Theme]:
    """Themes due on ``day`` or earlier; overdue items never drop out."""
    return sort_due(session.themes_due_on_or_before(day), day)


def due_exactly(session: StoreSession, day: date) -> list[Theme]:
    return sort_due(session.themes_due_exactly(day), day)


def reviewed_on(session: StoreSession, day: date) -> list[Theme]:
    return session.themes_reviewed_on(day)
