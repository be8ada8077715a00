"""Recurring payments - subscription store and polling reconciler."""

from .application import CycleReport, IngestContractUseCase, ReconcileCycleUseCase
from .infrastructure import DefaultUseCaseFactory, FileSubscriptionStore, StoreConfig

__all__ = [
    "CycleReport",
    "DefaultUseCaseFactory",
    "FileSubscriptionStore",
    "IngestContractUseCase",
    "ReconcileCycleUseCase",
    "StoreConfig",
]
__version__ = "0.1.0"
