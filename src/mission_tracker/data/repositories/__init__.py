"""Repository exports."""

from .mission_sets_repo import MissionSetFileRepository, MissionSetsRepository
from .roe_repo import ROE_FILENAME, RoeRepository
from .unity_nm_repo import UNITY_NM_FILENAME, UnityNmRepository

__all__ = [
    "MissionSetFileRepository",
    "MissionSetsRepository",
    "ROE_FILENAME",
    "RoeRepository",
    "UNITY_NM_FILENAME",
    "UnityNmRepository",
]
