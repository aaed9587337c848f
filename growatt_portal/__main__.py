"""Log in to the Growatt portal and print the plants of the account.

Credentials are read from GROWATT_USERNAME and GROWATT_PASSWORD (a ``.env``
file in the working directory is honoured).

Run with: python -m growatt_portal
"""

import argparse
import logging
import sys

import voluptuous as vol

from .client import GrowattPortal
from .config import GrowattConfig
from .exceptions import GrowattError

_LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="python -m growatt_portal",
        description="List the plants of a Growatt portal account.",
    )
    parser.add_argument(
        "--alternate", action="store_true", help="Use the alternate portal host"
    )
    parser.add_argument(
        "--env-file", help="Path of a .env file with GROWATT_* variables"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser.parse_args(argv)


def print_plants(client: GrowattPortal) -> None:
    """Print every plant with its summary data."""
    plants = client.get_plants()
    print(f"Found {len(plants)} plants:")  # noqa: T201
    for plant in plants:
        print(f"Plant ID: {plant.plant_id}")  # noqa: T201
        print(f"Plant Name: {plant.plant_name}")  # noqa: T201
        if plant.plant_address is not None:
            print(f"Address: {plant.plant_address}")  # noqa: T201
        if plant.plant_watts is not None:
            print(f"Power (W): {plant.plant_watts}")  # noqa: T201

        try:
            data = client.get_plant(plant.plant_id)
        except GrowattError as err:
            _LOGGER.error("Error getting plant data for %s: %s", plant.plant_id, err)
        else:
            if data.capacity is not None:
                print(f"Capacity: {data.capacity}")  # noqa: T201
            if data.today_energy is not None:
                print(f"Today's Energy: {data.today_energy}")  # noqa: T201
            if data.total_energy is not None:
                print(f"Total Energy: {data.total_energy}")  # noqa: T201
        print("-------------------")  # noqa: T201


def main(argv: list[str] | None = None) -> int:
    """Run the demo and return the exit code."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = GrowattConfig.from_env(dotenv_path=args.env_file)
    except vol.Invalid as err:
        _LOGGER.error("Invalid configuration: %s", err)
        return 2
    if config.username is None or config.password is None:
        _LOGGER.error("GROWATT_USERNAME and GROWATT_PASSWORD must be set")
        return 2

    client = GrowattPortal.from_config(config)
    if args.alternate:
        client.with_alternate_url()

    try:
        client.login(config.username, config.password)
        print_plants(client)
    except GrowattError as err:
        _LOGGER.error("%s", err)
        return 1
    finally:
        try:
            if client.logout():
                _LOGGER.info("Successfully logged out")
        except GrowattError as err:
            _LOGGER.error("Error during logout: %s", err)
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
