"""
Wind estimation service.

This module provides the business logic for running the streaming processor
over a batch of fixes, used by the track analysis pipeline and the API.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from turnwind.config.settings import EstimatorConfig
from turnwind.core.models import Fix, LowAccuracyFix, Status, Waiting
from turnwind.core.processor import SampleProcessor, ProcessorParams, ResultCallback
from turnwind.core.wind import WindEstimate

logger = logging.getLogger(__name__)


@dataclass
class ReplayResult:
    """Outcome of replaying a sequence of fixes through one processor."""
    estimates: List[WindEstimate] = field(default_factory=list)
    fix_count: int = 0
    rejected_count: int = 0
    final_status: Status = field(default_factory=Waiting)
    residual_turn_deg: float = 0.0  # Turn accumulated after the last completed cycle


def params_from_config() -> ProcessorParams:
    """Build processor parameters from the application configuration."""
    return ProcessorParams(**EstimatorConfig.as_dict())


class WindService:
    """
    Service for wind estimation over recorded or simulated fixes.

    Every call builds a fresh processor, so replays never share state.
    """

    def __init__(self, params: Optional[ProcessorParams] = None):
        self.params = params if params is not None else params_from_config()

    def create_processor(self, on_result: Optional[ResultCallback] = None) -> SampleProcessor:
        """
        Create a new processor for live ingestion.

        Args:
            on_result: Optional sink called with each WindEstimate

        Returns:
            SampleProcessor configured with this service's parameters
        """
        return SampleProcessor(params=self.params, on_result=on_result)

    def replay(self, fixes: Iterable[Fix]) -> ReplayResult:
        """
        Feed fixes in order through a fresh processor.

        Args:
            fixes: Fixes in delivery order

        Returns:
            ReplayResult with every completed estimate and ingestion counts
        """
        result = ReplayResult()

        def count_status(status: Status) -> None:
            if isinstance(status, LowAccuracyFix):
                result.rejected_count += 1

        processor = SampleProcessor(
            params=self.params,
            on_result=result.estimates.append,
            on_status=count_status,
        )

        for fix in fixes:
            result.fix_count += 1
            processor.submit_fix(fix)

        result.final_status = processor.status
        result.residual_turn_deg = processor.accumulated_turn_deg

        logger.info(f"Replayed {result.fix_count} fixes ({result.rejected_count} rejected): "
                    f"{len(result.estimates)} wind estimates")
        return result


def get_wind_service(params: Optional[ProcessorParams] = None) -> WindService:
    """
    Get a WindService instance.

    Returns:
        WindService instance
    """
    return WindService(params)
