"""Rendering helpers for bill lines and search results."""

from __future__ import annotations

from rich.text import Text

from dinerpos.config import CURRENCY
from dinerpos.models import BillItem, Deal, MenuItem


def badge_style(mode: str) -> str:
    """Return a consistent badge style for line kinds."""
    if mode == "D":
        return "bold #ffffff on #b23a48"
    return "bold #0b1f0f on #5fbf72"


def format_money(amount: float) -> str:
    return f"{CURRENCY} {amount:,.2f}"


def format_bill_line(line: BillItem) -> Text:
    """Render a bill line, tagging deal lines with their deal name."""
    text = Text()
    if line.deal_context is not None:
        text.append("D", style=badge_style("D"))
        text.append(f" {line.name}")
        text.append(f" ({line.deal_context.deal_name})", style="dim")
    else:
        text.append("M", style=badge_style("M"))
        text.append(f" {line.name}")
    text.append(f"  {line.quantity} x {line.price:,.2f} = {line.total_price:,.2f}")
    return text


def format_result_label(result: MenuItem | Deal) -> str:
    if isinstance(result, Deal):
        return f"#{result.deal_number} {result.name}  {format_money(result.calculated_total_deal_price)}"
    return f"{result.code} {result.name}  {format_money(result.price)}"


def result_matches(result: MenuItem | Deal, needle: str) -> bool:
    needle = needle.lower()
    if isinstance(result, Deal):
        return needle in result.name.lower() or needle in result.deal_number.lower()
    return needle in result.name.lower() or needle in result.code.lower()
