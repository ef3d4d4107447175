"""
Teaneck Township, NJ.

Data sources:
    IQM2 portal     meetings, agendas, minutes (https://teanecktownnj.iqm2.com)
    YouTube         video recordings (@TeaneckNJ07666), no transcripts yet

``create_teaneck_adapter`` picks the live scraper or the recorded stub data
from the ``TEANECK_ADAPTER_MODE`` setting.
"""

import logging

from adapters.base import MunicipalityAdapter
from adapters.iqm2 import IQM2Adapter
from models.config import AdapterMode, Jurisdiction
from utils.config import get_config

__all__ = ["TeaneckAdapter", "create_teaneck_adapter", "IQM2_BASE_URL"]

logger = logging.getLogger(__name__)

IQM2_BASE_URL = "https://teanecktownnj.iqm2.com/Citizens"


class TeaneckAdapter(IQM2Adapter):
    """Live adapter for the Teaneck IQM2 portal."""

    name = "Teaneck Township"
    jurisdiction = Jurisdiction.MUNICIPAL.value
    base_url = IQM2_BASE_URL


def create_teaneck_adapter() -> MunicipalityAdapter:
    """Build the Teaneck adapter for the configured mode."""
    mode = str(get_config()["adapters"]["teaneck_mode"]).lower()

    if mode == AdapterMode.STUB.value:
        from adapters.stub import StubTeaneckAdapter

        return StubTeaneckAdapter()

    if mode != AdapterMode.LIVE.value:
        logger.warning(f"Unknown TEANECK_ADAPTER_MODE {mode!r}, using live portal")
    return TeaneckAdapter()
