"""DataFrame and JSON output utilities for pair results."""

from typing import Any, Dict, List, Sequence, Union
from decimal import Decimal
from pathlib import Path
import json
import logging

import pandas as pd

from ..models import PairResult

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "resultId",
    "account",
    "resultType",
    "combination",
    "priority",
    "pairCount",
    "marginPerUnit",
    "totalMargin",
    "positions",
    "rule",
]


class DecimalEncoder(json.JSONEncoder):
    """Custom JSON encoder for Decimal values."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return float(obj)
        return super().default(obj)


def _result_record(result: PairResult) -> Dict[str, Any]:
    return {
        "resultId": result.result_id,
        "account": result.account,
        "resultType": result.result_type.value,
        "combination": result.combination.name,
        "priority": result.combination.priority,
        "pairCount": result.pair_count,
        "marginPerUnit": result.margin_per_unit,
        "totalMargin": result.total_margin_saving,
        "positions": [
            {
                "contract": usage.position.contract,
                "direction": usage.position.direction,
                "usedQuantity": usage.used_quantity,
            }
            for usage in result.position_usages
        ],
        "rule": result.rule_order,
    }


def results_to_dataframe(results: Sequence[PairResult]) -> pd.DataFrame:
    """
    Create a standardized DataFrame from pair results.

    Money columns keep their Decimal values.

    Args:
        results: Results from the matching engine

    Returns:
        DataFrame with one row per result and RESULT_COLUMNS as columns
    """
    records = [_result_record(result) for result in results]
    if not records:
        return pd.DataFrame(columns=RESULT_COLUMNS)
    return pd.DataFrame(records, columns=RESULT_COLUMNS)


def results_to_json(results: Sequence[PairResult], indent: int = 2) -> str:
    """Generate JSON string output for pair results."""
    records: List[Dict[str, Any]] = [_result_record(result) for result in results]
    return json.dumps(records, cls=DecimalEncoder, indent=indent)


def write_results_csv(results: Sequence[PairResult], output_path: Union[str, Path]) -> Path:
    """Write results to a CSV file, flattening position usages to text.

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    df = results_to_dataframe(results)
    df["positions"] = df["positions"].apply(
        lambda usages: "; ".join(
            f"{u['usedQuantity']} x {u['contract']} {u['direction']}" for u in usages
        )
    )
    df.to_csv(output_path, index=False)
    logger.info(f"Wrote {len(df)} results to {output_path}")
    return output_path
