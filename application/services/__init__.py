from .ingestion_service import IngestionCoordinator
from .rate_service import RateQueryService
from .single_flight import SingleFlight

__all__ = ['IngestionCoordinator', 'RateQueryService', 'SingleFlight']
