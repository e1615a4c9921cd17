"""Human-readable address labels."""

from ..models.location import LocationSuggestion

ADDRESS_FIELDS = ("name", "region", "country")


def format_address(location: LocationSuggestion) -> str:
    """Join the present ``name``, ``region`` and ``country`` with ``", "``.

    Absent or empty components are skipped, so there are never stray separators.

    Example:
        >>> format_address(LocationSuggestion(region="Berlin", country="Germany", latitude=0, longitude=0))
        'Berlin, Germany'
        >>> format_address(LocationSuggestion(latitude=0, longitude=0))
        ''
    """
    parts = [getattr(location, field) for field in ADDRESS_FIELDS]
    return ", ".join(part for part in parts if part)
