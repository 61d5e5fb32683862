"""Base matcher shared by the margin offset matching rules."""

from typing import Any, Union
import uuid
import logging
from abc import ABC, abstractmethod

from ..models import PairResult
from ..config import MarginConfigManager
from ..core import AccountPositionPool, CombinationCatalog

logger = logging.getLogger(__name__)


class BaseMatcher(ABC):
    """Base class for all margin matching rules.

    Each rule reads the shared catalog and consumes lots from the pool of a
    single account.
    """

    rule_number: int = 0

    def __init__(self, config_manager: MarginConfigManager):
        """Initialize base matcher with configuration.

        Args:
            config_manager: Configuration manager for rule settings
        """
        self.config_manager = config_manager
        self.rule_name = config_manager.get_rule_name(self.rule_number)

        logger.debug(f"Initialized {self.__class__.__name__} for rule {self.rule_number}")

    def generate_result_id(self) -> str:
        """Generate a unique result ID with rule number.

        Returns:
            Result ID in format: MRG_{rule}_{uuid}
        """
        unique_id = str(uuid.uuid4())[:8]
        return f"MRG_{self.rule_number}_{unique_id}"

    @abstractmethod
    def find_pairs(
        self, pool: AccountPositionPool, catalog: CombinationCatalog
    ) -> list[PairResult]:
        """Produce results for one account using this rule's logic.

        Must be implemented by each specific matcher. Consumed lots are
        recorded in the pool.

        Args:
            pool: Available lots of the account being matched
            catalog: Shared read-only combination catalog

        Returns:
            List of results produced by this rule
        """
        pass

    @abstractmethod
    def get_rule_info(self) -> dict[str, Union[str, int, list[str], Any]]:
        """Get information about this matching rule.

        Returns:
            Dictionary with rule metadata (number, name, description, etc.)
        """
        pass
