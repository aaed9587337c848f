"""Client for the Growatt solar-monitoring web portal."""

from .client import EnergyPeriod, GrowattPortal, MixDevice
from .config import GrowattConfig
from .const import ALTERNATE_URL, DEFAULT_URL
from .exceptions import (
    GrowattAuthenticationError,
    GrowattError,
    GrowattInvalidResponseError,
    GrowattMalformedJsonError,
    GrowattNotAuthenticatedError,
    GrowattParameterError,
    GrowattRequestError,
)
from .models import Plant, PlantData, PlantList
from .session import Credentials, SessionState, hash_password
from .unwrap import ARRAY, BARE, OBJ, Unwrap, UnwrapMode

__all__ = [
    "ALTERNATE_URL",
    "ARRAY",
    "BARE",
    "DEFAULT_URL",
    "OBJ",
    "Credentials",
    "EnergyPeriod",
    "GrowattAuthenticationError",
    "GrowattConfig",
    "GrowattError",
    "GrowattInvalidResponseError",
    "GrowattMalformedJsonError",
    "GrowattNotAuthenticatedError",
    "GrowattParameterError",
    "GrowattPortal",
    "GrowattRequestError",
    "MixDevice",
    "Plant",
    "PlantData",
    "PlantList",
    "SessionState",
    "Unwrap",
    "UnwrapMode",
    "hash_password",
]
