"""
Formatting utilities for plan values and progress.

Turn money, commission rates and evaluation results into readable text.
"""

from decimal import Decimal

from opportunity.core.plan import Money, OpportunityPlan, OpportunityProgress


CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
}


def format_money(money: Money, decimals: int = 2) -> str:
    """
    Format money with currency symbol or code.

    Args:
        money: Amount and currency
        decimals: Number of decimal places

    Returns:
        Formatted string

    Example:
        >>> format_money(Money(amount=Decimal("1234.5"), currency="USD"))
        '$1,234.50'
        >>> format_money(Money(amount=Decimal("10"), currency="MXN"))
        '10.00 MXN'
    """
    formatted = f"{money.amount:,.{decimals}f}"
    symbol = CURRENCY_SYMBOLS.get(money.currency)
    if symbol:
        return f"{symbol}{formatted}"
    return f"{formatted} {money.currency}"


def format_rate(rate: float | Decimal) -> str:
    """
    Format a 0..1 rate as a percentage without trailing zeros.

    Example:
        >>> format_rate(0.15)
        '15%'
        >>> format_rate(0.125)
        '12.5%'
    """
    percent = (Decimal(str(rate)) * 100).normalize()
    if percent == percent.to_integral_value():
        percent = percent.quantize(Decimal("1"))
    return f"{percent}%"


def format_progress_summary(progress: OpportunityProgress, plan: OpportunityPlan) -> str:
    """
    Render progress as plain text, one line per phase.

    Args:
        progress: Evaluation result
        plan: Plan the result was evaluated against

    Returns:
        Multi-line summary
    """
    current = plan.get_phase(progress.current_phase_id)
    current_name = current.name if current else progress.current_phase_id

    lines = [f"Member {progress.member_id}: {current_name}"]
    for item in progress.phase_progress:
        phase = plan.get_phase(item.phase_id)
        name = phase.name if phase else item.phase_id
        marker = "[x]" if item.is_unlocked else "[ ]"
        rate = f" ({format_rate(phase.ecommerce_commission_rate)})" if phase else ""
        lines.append(f"{marker} {name}{rate}")

    lines.append(
        f"Active: {progress.total_active_members} total, "
        f"{progress.direct_active_members} direct, "
        f"{progress.second_level_active_members} second level"
    )
    return "\n".join(lines)
