from cardvalue.schemas.valuation import Frequency


def periods_per_year(frequency: Frequency | None) -> int:
    """Number of periods a frequency splits the year into. Unspecified is 0."""
    match frequency:
        case Frequency.ANNUAL:
            return 1
        case Frequency.SEMI_ANNUAL:
            return 2
        case Frequency.QUARTERLY:
            return 4
        case Frequency.MONTHLY:
            return 12
        case Frequency.UNSPECIFIED | None:
            return 0
    raise ValueError(f"Unknown frequency: {frequency!r}")


def annualize(amount_cents: int, frequency: Frequency | None) -> int:
    """Scale a per-period amount to a full year."""
    return amount_cents * periods_per_year(frequency)
