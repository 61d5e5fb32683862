"""Aggregation and plain-text formatting of pair results."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Sequence
from pydantic import BaseModel, Field, ConfigDict

from ..models import PairResult

TWO_PLACES = Decimal("0.01")


class AccountSummary(BaseModel):
    """Totals for a single account."""

    model_config = ConfigDict(frozen=True)

    account: str
    paired_combinations: int = 0
    paired_lots: int = Field(default=0, description="Lots consumed by paired results")
    unpaired_lots: int = Field(default=0, description="Residual lots valued standalone")
    total_margin: Decimal = Decimal("0")

    @property
    def pairing_efficiency(self) -> float:
        """Share of the account's valued lots that were paired, in percent."""
        total = self.paired_lots + self.unpaired_lots
        return (self.paired_lots / total) * 100 if total else 0.0


class MarginSummary(BaseModel):
    """Aggregate totals across all results."""

    model_config = ConfigDict(frozen=True)

    paired_combinations: int = Field(default=0, description="Number of paired results")
    total_pairs: int = Field(default=0, description="Sum of pair_count over paired results")
    contracts_paired: int = Field(default=0, description="total_pairs * legs per pair")
    unpaired_positions: int = Field(default=0, description="Number of unpaired results")
    unpaired_lots: int = 0
    paired_margin: Decimal = Decimal("0")
    unpaired_margin: Decimal = Decimal("0")
    total_margin: Decimal = Decimal("0")
    accounts: List[AccountSummary] = Field(default_factory=list)


def summarize(results: Sequence[PairResult], legs_per_pair: int = 2) -> MarginSummary:
    """Aggregate results into totals and a per-account breakdown.

    Total contracts paired assumes ``legs_per_pair`` legs for every pair.

    Args:
        results: Results from the matching engine
        legs_per_pair: Legs counted per pair for contracts paired

    Returns:
        MarginSummary with totals
    """
    paired_combinations = 0
    total_pairs = 0
    unpaired_positions = 0
    unpaired_lots = 0
    paired_margin = Decimal("0")
    unpaired_margin = Decimal("0")

    per_account: Dict[str, Dict] = {}

    for result in results:
        account = per_account.setdefault(
            result.account,
            {
                "account": result.account,
                "paired_combinations": 0,
                "paired_lots": 0,
                "unpaired_lots": 0,
                "total_margin": Decimal("0"),
            },
        )
        account["total_margin"] += result.total_margin_saving

        if result.is_unpaired:
            unpaired_positions += 1
            unpaired_lots += result.pair_count
            unpaired_margin += result.total_margin_saving
            account["unpaired_lots"] += result.pair_count
        else:
            paired_combinations += 1
            total_pairs += result.pair_count
            paired_margin += result.total_margin_saving
            account["paired_combinations"] += 1
            account["paired_lots"] += result.contracts_used

    return MarginSummary(
        paired_combinations=paired_combinations,
        total_pairs=total_pairs,
        contracts_paired=total_pairs * legs_per_pair,
        unpaired_positions=unpaired_positions,
        unpaired_lots=unpaired_lots,
        paired_margin=paired_margin,
        unpaired_margin=unpaired_margin,
        total_margin=paired_margin + unpaired_margin,
        accounts=[AccountSummary(**values) for values in per_account.values()],
    )


def format_money(value: Decimal) -> str:
    """Two-decimal fixed formatting, half-up rounding."""
    return str(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def format_result(result: PairResult) -> str:
    """Multi-line detail block for one result."""
    lines = []
    if result.is_unpaired:
        lines.append(f"Unpaired Position (standalone margin) - {result.account}")
        for usage in result.position_usages:
            lines.append(f"  Contract: {usage.position.contract} {usage.position.direction}")
            lines.append(f"  Quantity: {usage.used_quantity}")
            lines.append(f"  Margin per lot: {format_money(result.margin_per_unit)}")
            lines.append(f"  Total margin: {format_money(result.total_margin_saving)}")
    else:
        combination = result.combination
        lines.append(
            f"Pair: {combination.name} (priority={combination.priority}) - {result.account}"
        )
        lines.append(f"  Pairs matched: {result.pair_count}")
        lines.append(f"  Margin per pair: {format_money(result.margin_per_unit)}")
        lines.append(f"  Total margin: {format_money(result.total_margin_saving)}")
        lines.append("  Positions used:")
        for usage in result.position_usages:
            lines.append(f"    - {usage}")
    return "\n".join(lines)


def format_report(results: Sequence[PairResult], legs_per_pair: int = 2) -> str:
    """Render results as a plain-text report.

    Contains one numbered detail block per result followed by the paired
    combination count, contracts paired, unpaired position count and total
    margin requirement.
    """
    if not results:
        return "No pairs found!"

    lines = ["=== MARGIN CALCULATION RESULTS ===", ""]
    for i, result in enumerate(results, start=1):
        label = f"Position #{i} (Unpaired)" if result.is_unpaired else f"Pair #{i}"
        lines.append(label)
        lines.append(format_result(result))
        lines.append("")

    summary = summarize(results, legs_per_pair)
    lines.extend(
        [
            "=====================================",
            f"Total paired combinations: {summary.paired_combinations}",
            f"Total contracts paired: {summary.contracts_paired}",
            f"Total unpaired positions: {summary.unpaired_positions}",
            f"Total margin requirement: {format_money(summary.total_margin)}",
        ]
    )
    return "\n".join(lines)
