"""Domain definition exports."""

from .catalog import Catalog
from .mission_def import (
    GateDef,
    GateType,
    LocationDef,
    MissionDef,
    MissionImageDef,
    MissionNodeDef,
    MissionSetDef,
    RewardDef,
)
from .roe_def import (
    GENERAL_SUBCATEGORY,
    RoeCatalogDef,
    RoeCategoryGroup,
    RoeCategoryInfoDef,
    RoeNpcDef,
    RoeObjectiveDef,
    RoeRewardsDef,
    RoeSubcategoryGroup,
)
from .unity_nm_def import (
    EtherealJunctionsDef,
    JunctionMapDef,
    UnityNmCatalogDef,
    UnityNmDef,
    UnmCategoryGroup,
    UnmNotableRewardDef,
    UnmPointRewardsDef,
)

__all__ = [
    "Catalog",
    "EtherealJunctionsDef",
    "GENERAL_SUBCATEGORY",
    "GateDef",
    "GateType",
    "JunctionMapDef",
    "LocationDef",
    "MissionDef",
    "MissionImageDef",
    "MissionNodeDef",
    "MissionSetDef",
    "RewardDef",
    "RoeCatalogDef",
    "RoeCategoryGroup",
    "RoeCategoryInfoDef",
    "RoeNpcDef",
    "RoeObjectiveDef",
    "RoeRewardsDef",
    "RoeSubcategoryGroup",
    "UnityNmCatalogDef",
    "UnityNmDef",
    "UnmCategoryGroup",
    "UnmNotableRewardDef",
    "UnmPointRewardsDef",
]
