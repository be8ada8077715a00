"""Application layer - Use cases orchestrating recurring payments."""

from .dtos import CycleReport
from .use_cases import IngestContractUseCase, ReconcileCycleUseCase

__all__ = ["CycleReport", "IngestContractUseCase", "ReconcileCycleUseCase"]
