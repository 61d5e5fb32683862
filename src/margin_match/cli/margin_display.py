"""Display module for margin matching results with rich terminal output."""

from typing import List, Dict, Any, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from ..models import PairResult
from ..reporting import MarginSummary, format_money


class MarginDisplay:
    """Handles all display output for the margin matching system."""

    def __init__(self, console: Optional[Console] = None, detail_row_limit: int = 50):
        """Initialize display with Rich console.

        Args:
            console: Optional console, e.g. one recording output for tests
            detail_row_limit: Maximum rows shown per detail table
        """
        self.console = console or Console()
        self.detail_row_limit = detail_row_limit

    def show_header(self) -> None:
        """Display the margin matching system header."""
        header_text = Text("COMBINATION MARGIN MATCHING", style="bold blue")
        subtitle = "Margin Offset Matching Engine v1.0"

        panel = Panel(
            f"{subtitle}\n\n"
            "Rule 1: Greedy combination pairing in priority order\n"
            "Rule 2: Standalone margin for residual positions\n"
            "Accounts matched independently",
            title=header_text,
            border_style="blue",
            padding=(1, 2)
        )

        self.console.print()
        self.console.print(panel)
        self.console.print()

    def show_loading_summary(
        self, combination_count: int, position_count: int, account_count: int
    ) -> None:
        """Display summary of loaded data.

        Args:
            combination_count: Number of combinations loaded
            position_count: Number of position records loaded
            account_count: Number of distinct accounts
        """
        summary = Panel(
            f"Combinations: {combination_count:,}\n"
            f"Positions: {position_count:,}\n"
            f"Accounts: {account_count:,}",
            title="[bold green]Data Loaded Successfully[/bold green]",
            border_style="green"
        )

        self.console.print(summary)
        self.console.print()

    def show_match_results(self, results: List[PairResult], summary: MarginSummary) -> None:
        """Display detailed results followed by the totals.

        Args:
            results: All results from the engine
            summary: Aggregated totals of those results
        """
        paired = [r for r in results if not r.is_unpaired]
        unpaired = [r for r in results if r.is_unpaired]

        if paired:
            self._show_paired_results(paired)
        if unpaired:
            self._show_unpaired_results(unpaired)
        if not results:
            self.console.print("[bold yellow]No pairs found![/bold yellow]")
            self.console.print()

        self.show_totals(summary)

    def _show_paired_results(self, results: List[PairResult]) -> None:
        self.console.print(f"[bold cyan]Paired Combinations ({len(results)}):[/bold cyan]")

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Account", width=12)
        table.add_column("Combination", width=22)
        table.add_column("Priority", justify="right", width=8)
        table.add_column("Pairs", justify="right", width=6)
        table.add_column("Margin/Pair", justify="right", width=12)
        table.add_column("Total", justify="right", width=12)
        table.add_column("Positions Used", width=30)

        for result in results[:self.detail_row_limit]:
            table.add_row(
                result.account,
                result.combination.name,
                str(result.combination.priority),
                str(result.pair_count),
                format_money(result.margin_per_unit),
                format_money(result.total_margin_saving),
                ", ".join(str(usage) for usage in result.position_usages),
            )

        self.console.print(table)

        if len(results) > self.detail_row_limit:
            self.console.print(
                f"[dim]... and {len(results) - self.detail_row_limit} more paired combinations[/dim]"
            )

        self.console.print()

    def _show_unpaired_results(self, results: List[PairResult]) -> None:
        self.console.print(f"[bold red]Unpaired Positions ({len(results)}):[/bold red]")

        table = Table(show_header=True, header_style="bold red")
        table.add_column("Account", width=12)
        table.add_column("Contract", width=10)
        table.add_column("B/S", width=5)
        table.add_column("Qty", justify="right", width=6)
        table.add_column("Margin/Lot", justify="right", width=12)
        table.add_column("Total", justify="right", width=12)
        table.add_column("Reference", width=22)

        for result in results[:self.detail_row_limit]:
            position = result.position_usages[0].position
            table.add_row(
                result.account,
                position.contract,
                position.direction,
                str(result.pair_count),
                format_money(result.margin_per_unit),
                format_money(result.total_margin_saving),
                result.combination.name,
            )

        self.console.print(table)

        if len(results) > self.detail_row_limit:
            self.console.print(
                f"[dim]... and {len(results) - self.detail_row_limit} more unpaired positions[/dim]"
            )

        self.console.print()

    def show_totals(self, summary: MarginSummary) -> None:
        """Display the aggregate totals panel."""
        stats_text = (
            f"Total paired combinations: {summary.paired_combinations}\n"
            f"Total contracts paired: {summary.contracts_paired}\n"
            f"Total unpaired positions: {summary.unpaired_positions}\n"
            f"Total margin requirement: {format_money(summary.total_margin)}"
        )

        stats_panel = Panel(
            stats_text,
            title="[bold yellow]Margin Calculation Results[/bold yellow]",
            border_style="yellow"
        )

        self.console.print(stats_panel)
        self.console.print()

    def show_account_breakdown(
        self, summary: MarginSummary, statistics: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> None:
        """Display per-account totals and pairing efficiency.

        Args:
            summary: Aggregated totals with the per-account breakdown
            statistics: Optional pool statistics per account, for dropped lots
        """
        table = Table(show_header=True, header_style="bold blue", title="Accounts")
        table.add_column("Account", width=12)
        table.add_column("Pairs", justify="right", width=6)
        table.add_column("Paired Lots", justify="right", width=11)
        table.add_column("Unpaired Lots", justify="right", width=13)
        table.add_column("Dropped Lots", justify="right", width=12)
        table.add_column("Efficiency", justify="right", width=10)
        table.add_column("Margin", justify="right", width=14)

        statistics = statistics or {}
        for account in summary.accounts:
            dropped = statistics.get(account.account, {}).get("dropped_lots", 0)
            table.add_row(
                account.account,
                str(account.paired_combinations),
                str(account.paired_lots),
                str(account.unpaired_lots),
                str(dropped) if dropped else "-",
                f"{account.pairing_efficiency:.1f}%",
                format_money(account.total_margin),
            )

        self.console.print(table)
        self.console.print()

    def show_error(self, message: str) -> None:
        """Display an error message.

        Args:
            message: Error message to display
        """
        error_panel = Panel(
            message,
            title="[bold red]Error[/bold red]",
            border_style="red"
        )
        self.console.print(error_panel)

    def show_rule_info(self, rule_info: Dict) -> None:
        """Display information about a matching rule.

        Args:
            rule_info: Dictionary with rule metadata
        """
        rule_text = (
            f"Rule {rule_info['rule_number']}: {rule_info['name']}\n"
            f"{rule_info['description']}\n"
            f"Matched on: {', '.join(rule_info['matched_fields'])}"
        )

        if "notes" in rule_info:
            rule_text += f"\nNotes: {rule_info['notes']}"

        panel = Panel(
            rule_text,
            title=f"[bold blue]Rule {rule_info['rule_number']} Information[/bold blue]",
            border_style="blue"
        )

        self.console.print(panel)
        self.console.print()
