"""Output formatting helpers for the planner views and agent tools."""


def format_dollar(amount: float) -> str:
    """Format a dollar amount as $14.3M, $127.0K, or $500."""
    if amount == 0:
        return "$0"
    prefix = "-" if amount < 0 else ""
    abs_amt = abs(amount)
    if abs_amt >= 1_000_000:
        return f"{prefix}${abs_amt / 1_000_000:.1f}M"
    elif abs_amt >= 1_000:
        return f"{prefix}${abs_amt / 1_000:.1f}K"
    else:
        return f"{prefix}${abs_amt:.0f}"


def format_days(days: float) -> str:
    """Format a duration in days as '12.4 d'."""
    return f"{days:.1f} d"


def format_musd(amount: float) -> str:
    """Format an amount in millions of USD, e.g. '2.35M USD'."""
    return f"{amount / 1_000_000:.2f}M USD"
