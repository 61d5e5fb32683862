"""Main entry point for combination margin matching system."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import argparse
import sys
import pandas as pd

from .config import MarginConfigManager
from .core import AccountPositionPool, CombinationCatalog, PositionBook
from .loaders import CombinationCatalogLoader, PositionBookLoader
from .matchers import BaseMatcher, CombinationMatcher, StandaloneMatcher
from .models import Combination, PairResult, Position
from .cli import MarginDisplay
from .normalizers import RecordNormalizer
from .reporting import format_report, summarize
from .utils import results_to_json, write_results_csv
from .validation import LoadError

# Default file paths
DEFAULT_DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CATALOG_FILE = "combinations.txt"
DEFAULT_POSITIONS_FILE = "positions.csv"


logger = logging.getLogger(__name__)

CatalogInput = Union[CombinationCatalog, Sequence[Combination]]
PositionsInput = Union[PositionBook, Sequence[Position]]


class MarginMatchingEngine:
    """Main combination margin matching engine."""

    config_manager: MarginConfigManager
    normalizer: RecordNormalizer
    catalog_loader: CombinationCatalogLoader
    position_loader: PositionBookLoader
    display: MarginDisplay
    matchers: Dict[int, BaseMatcher]

    def __init__(
        self,
        config_manager: Optional[MarginConfigManager] = None,
        display: Optional[MarginDisplay] = None,
    ):
        """Initialize margin matching engine.

        Args:
            config_manager: Optional config manager. Creates default if None.
            display: Optional display. Creates a default console display if None.
        """
        self.config_manager = config_manager or MarginConfigManager()
        self.normalizer = RecordNormalizer(self.config_manager)
        self.catalog_loader = CombinationCatalogLoader(self.config_manager, self.normalizer)
        self.position_loader = PositionBookLoader(self.config_manager, self.normalizer)
        self.display = display or MarginDisplay(
            detail_row_limit=self.config_manager.matching_config.detail_row_limit
        )

        # Build matcher registry for rule lookup
        self.matchers = {
            1: CombinationMatcher(self.config_manager),
            2: StandaloneMatcher(self.config_manager),
        }

        self.last_statistics: Dict[str, Dict[str, Any]] = {}

        logger.info("Initialized margin matching engine")

    def load_catalog(self, catalog_path: Path) -> CombinationCatalog:
        """Load the combination catalog.

        Raises:
            CatalogLoadError: If the source cannot be read
        """
        return self._build_catalog(self.catalog_loader.load(catalog_path))

    def _build_catalog(self, combinations: Sequence[Combination]) -> CombinationCatalog:
        """Wrap combinations in a catalog using the configured name format."""
        settings = self.config_manager.get_catalog_settings()
        return CombinationCatalog(
            combinations,
            sell_prefix=settings["sell_prefix"],
            leg_separator=settings["leg_separator"],
        )

    def load_positions(self, positions_path: Path) -> PositionBook:
        """Load the position book.

        Raises:
            PositionLoadError: If the source cannot be read
        """
        return PositionBook(self.position_loader.load(positions_path))

    def find_pairs(self, catalog: CatalogInput, positions: PositionsInput) -> List[PairResult]:
        """Match every account's positions against the catalog.

        Accounts are matched independently, in first-seen order. Per-account
        pool statistics are kept in ``last_statistics``.

        Args:
            catalog: Combination catalog or plain list of combinations
            positions: Position book or plain list of positions

        Returns:
            Results of all accounts; per account, paired results in match
            order followed by unpaired results
        """
        if not isinstance(catalog, CombinationCatalog):
            catalog = self._build_catalog(catalog)
        if not isinstance(positions, PositionBook):
            positions = PositionBook(positions)

        accounts = positions.accounts()
        max_workers = self.config_manager.get_max_workers()

        def match(account: str) -> Tuple[List[PairResult], Dict[str, Any]]:
            return self._match_account(account, positions.positions_for(account), catalog)

        if max_workers > 1 and len(accounts) > 1:
            # Accounts share only read-only data, so passes run independently
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                outcomes = list(executor.map(match, accounts))
        else:
            outcomes = [match(account) for account in accounts]

        all_results: List[PairResult] = []
        self.last_statistics = {}
        for account, (results, statistics) in zip(accounts, outcomes):
            all_results.extend(results)
            self.last_statistics[account] = statistics

        logger.info(
            f"Matched {len(accounts)} accounts, produced {len(all_results)} results"
        )
        return all_results

    def _match_account(
        self, account: str, positions: Sequence[Position], catalog: CombinationCatalog
    ) -> Tuple[List[PairResult], Dict[str, Any]]:
        """Run all rules in processing order for one account."""
        pool = AccountPositionPool(account, positions)
        results: List[PairResult] = []

        for rule_number in self.config_manager.get_processing_order():
            matcher = self._get_matcher_for_rule(rule_number)
            if not matcher:
                logger.warning(f"No matcher found for rule {rule_number}")
                continue
            results.extend(matcher.find_pairs(pool, catalog))

        statistics = pool.get_statistics()
        if statistics["dropped_lots"]:
            logger.warning(
                f"{account}: {statistics['dropped_lots']} residual lots had no "
                "standalone combination and were not valued"
            )
        return results, statistics

    def _get_matcher_for_rule(self, rule_number: int) -> Optional[BaseMatcher]:
        """Get matcher for specific rule number.

        Args:
            rule_number: Rule number to get matcher for

        Returns:
            Matcher object or None if not found
        """
        return self.matchers.get(rule_number)

    def run_matching(
        self,
        catalog_path: Path,
        positions_path: Path,
        show_accounts: bool = True,
    ) -> List[PairResult]:
        """Run the complete load, match and display process.

        Args:
            catalog_path: Path to combination parameter file
            positions_path: Path to positions CSV file
            show_accounts: Whether to display the per-account breakdown

        Returns:
            List of all pair results

        Raises:
            LoadError: If either source cannot be loaded
        """
        self.display.show_header()

        try:
            logger.info("Loading margin data...")
            catalog = self.load_catalog(catalog_path)
            book = self.load_positions(positions_path)
        except LoadError as e:
            logger.error(f"Error loading margin data: {e}")
            self.display.show_error(str(e))
            raise

        self.display.show_loading_summary(len(catalog), len(book), len(book.accounts()))

        results = self.find_pairs(catalog, book)

        summary = summarize(results, self.config_manager.get_legs_per_pair())
        self.display.show_match_results(results, summary)

        if show_accounts:
            self.display.show_account_breakdown(summary, self.last_statistics)

        return results

    def run_matching_from_dataframes(
        self, catalog_df: pd.DataFrame, positions_df: pd.DataFrame
    ) -> Tuple[List[PairResult], Dict[str, Any]]:
        """Run matching directly from DataFrames without source files.

        Args:
            catalog_df: Catalog rows in column order, headers removed
            positions_df: Position rows in column order, headers removed

        Returns:
            Tuple of (results, statistics)
        """
        logger.info("Creating catalog and positions from DataFrames...")
        catalog = self._build_catalog(self.catalog_loader.from_dataframe(catalog_df))
        book = PositionBook(self.position_loader.from_dataframe(positions_df))

        results = self.find_pairs(catalog, book)
        summary = summarize(results, self.config_manager.get_legs_per_pair())

        statistics: Dict[str, Any] = {
            "combination_count": len(catalog),
            "position_count": len(book),
            "skipped_catalog_rows": list(self.catalog_loader.skipped_rows),
            "skipped_position_rows": list(self.position_loader.skipped_rows),
            "accounts": dict(self.last_statistics),
            "summary": summary,
        }
        return results, statistics

    def show_rules(self) -> None:
        """Display information about all available matching rules."""
        self.display.show_header()

        for rule_number in sorted(self.matchers.keys()):
            self.display.show_rule_info(self.matchers[rule_number].get_rule_info())


def find_pairs(
    catalog: CatalogInput,
    positions: PositionsInput,
    config_manager: Optional[MarginConfigManager] = None,
) -> List[PairResult]:
    """Match positions against a catalog with a default engine.

    Args:
        catalog: Combination catalog or list of combinations
        positions: Position book or list of positions
        config_manager: Optional config manager

    Returns:
        Ordered list of pair results
    """
    engine = MarginMatchingEngine(config_manager, display=MarginDisplay())
    return engine.find_pairs(catalog, positions)


def setup_logging(log_level: str = "NONE") -> None:
    """Set up logging configuration for margin matching.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, NONE)
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_level.upper() == "NONE":
        logging.getLogger().setLevel(logging.CRITICAL + 1)  # Higher than CRITICAL
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Combination Margin Matching System")
    parser.add_argument("--catalog", type=Path, help="Path to combination parameter file")
    parser.add_argument("--positions", type=Path, help="Path to positions CSV file")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help=f"Data directory containing source files (default: {DEFAULT_DATA_DIR})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for matching accounts in parallel",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the plain-text report instead of rich tables",
    )
    parser.add_argument(
        "--no-accounts",
        action="store_true",
        help="Hide the per-account breakdown",
    )
    parser.add_argument("--output-csv", type=Path, help="Write results to a CSV file")
    parser.add_argument("--output-json", type=Path, help="Write results to a JSON file")
    parser.add_argument(
        "--show-rules",
        action="store_true",
        help="Display information about matching rules and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "NONE"],
        default="NONE",
        help="Set logging level",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for margin matching system."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)

    try:
        config_manager = MarginConfigManager()
        if args.workers is not None:
            config_manager = config_manager.with_max_workers(args.workers)

        engine = MarginMatchingEngine(config_manager)

        if args.show_rules:
            engine.show_rules()
            return

        catalog_path = args.catalog or args.data_dir / DEFAULT_CATALOG_FILE
        positions_path = args.positions or args.data_dir / DEFAULT_POSITIONS_FILE

        if args.plain:
            catalog = engine.load_catalog(catalog_path)
            book = engine.load_positions(positions_path)
            results = engine.find_pairs(catalog, book)
            print(format_report(results, config_manager.get_legs_per_pair()))
        else:
            results = engine.run_matching(
                catalog_path,
                positions_path,
                show_accounts=not args.no_accounts,
            )

        if args.output_csv:
            write_results_csv(results, args.output_csv)
        if args.output_json:
            args.output_json.write_text(results_to_json(results), encoding="utf-8")

        logger.info(f"Margin matching completed. Total results: {len(results)}")

    except LoadError as e:
        if args.plain:
            print(f"Error: {e}", file=sys.stderr)
        logger.error(f"Could not load source data: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Matching process interrupted by user")
        sys.exit(1)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(f"Fatal error during matching process: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
