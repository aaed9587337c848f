"""Response shapes returned by the Growatt web portal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import GrowattMalformedJsonError


def _optional_float(data: dict[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as err:
        msg = f"Field '{key}' is not a number: {value!r}"
        raise GrowattMalformedJsonError(msg) from err


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return None if value is None else str(value)


def _optional_bool(data: dict[str, Any], key: str) -> bool | None:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    msg = f"Field '{key}' is not a boolean: {value!r}"
    raise GrowattMalformedJsonError(msg)


def _require_mapping(data: Any, shape: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        msg = f"Expected a JSON object for {shape}, got {type(data).__name__}"
        raise GrowattMalformedJsonError(msg)
    return data


@dataclass
class Plant:
    """A plant entry from the portal's plant list."""

    plant_id: str
    plant_name: str
    plant_address: str | None = None
    plant_watts: float | None = None
    is_share: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Plant:
        """
        Build a Plant from a plant list record.

        The portal names the plant under either ``name`` or ``plantName``.

        Raises:
            GrowattMalformedJsonError: If ``id`` or both name fields are missing.

        """
        data = _require_mapping(data, "Plant")
        if data.get("id") is None:
            msg = "Plant record is missing required field 'id'"
            raise GrowattMalformedJsonError(msg)
        name = data.get("name")
        if name is None:
            name = data.get("plantName")
        if name is None:
            msg = "Plant record is missing required field 'name'"
            raise GrowattMalformedJsonError(msg)

        return cls(
            plant_id=str(data["id"]),
            plant_name=str(name),
            plant_address=_optional_str(data, "plantAddress"),
            plant_watts=_optional_float(data, "plantPower"),
            is_share=_optional_bool(data, "isShare"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the record with the portal's field names."""
        return {
            "id": self.plant_id,
            "name": self.plant_name,
            "plantAddress": self.plant_address,
            "plantPower": self.plant_watts,
            "isShare": self.is_share,
        }


@dataclass
class PlantList:
    """All plants visible to the logged-in account."""

    plants: list[Plant]

    @classmethod
    def from_list(cls, data: Any) -> PlantList:
        """Build a PlantList from the top-level plant array."""
        if not isinstance(data, list):
            msg = f"Expected a JSON array of plants, got {type(data).__name__}"
            raise GrowattMalformedJsonError(msg)
        return cls(plants=[Plant.from_dict(item) for item in data])

    def to_list(self) -> list[dict[str, Any]]:
        """Return the plants as a portal plant array."""
        return [plant.to_dict() for plant in self.plants]

    def __iter__(self):
        return iter(self.plants)

    def __len__(self) -> int:
        return len(self.plants)


@dataclass
class PlantData:
    """Summary data of a single plant. The portal may omit any field."""

    plant_name: str | None = None
    plant_id: str | None = None
    capacity: float | None = None
    today_energy: float | None = None
    total_energy: float | None = None
    current_power: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> PlantData:
        """Build PlantData from the ``obj`` payload of getPlantData."""
        data = _require_mapping(data, "PlantData")
        return cls(
            plant_name=_optional_str(data, "plantName"),
            plant_id=_optional_str(data, "plantId"),
            capacity=_optional_float(data, "capacity"),
            today_energy=_optional_float(data, "todayEnergy"),
            total_energy=_optional_float(data, "totalEnergy"),
            current_power=_optional_float(data, "currentPower"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "plantName": self.plant_name,
            "plantId": self.plant_id,
            "capacity": self.capacity,
            "todayEnergy": self.today_energy,
            "totalEnergy": self.total_energy,
            "currentPower": self.current_power,
        }
