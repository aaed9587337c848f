"""Client for the Growatt web portal (server.growatt.com)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date, datetime, timedelta
from enum import Enum
import logging
import platform
import threading
from typing import Any, TypeVar

import requests

from .config import GrowattConfig
from .const import (
    ALTERNATE_URL,
    BROWSER_ACCEPT,
    BROWSER_USER_AGENT,
    DEFAULT_SESSION_DURATION,
    DEFAULT_TIMEOUT,
    DEFAULT_URL,
    FORM_CONTENT_TYPE,
    LOGIN_SUCCESS_RESULT,
    LOGIN_UNKNOWN_ERROR,
    LOGOUT_SUCCESS_STATUS,
)
from .exceptions import (
    GrowattAuthenticationError,
    GrowattError,
    GrowattInvalidResponseError,
    GrowattMalformedJsonError,
    GrowattNotAuthenticatedError,
    GrowattParameterError,
    GrowattRequestError,
)
from .models import PlantData, PlantList
from .session import Credentials, SessionState, hash_password
from .unwrap import ARRAY, BARE, OBJ, Unwrap

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class EnergyPeriod(Enum):
    """Energy chart granularity of a MIX device."""

    DAY = "day"
    MONTH = "month"
    YEAR = "year"
    TOTAL = "total"

    @property
    def chart_path(self) -> str:
        """Return the chart endpoint for this period."""
        return {
            EnergyPeriod.DAY: "/panel/mix/getMIXEnergyDayChart",
            EnergyPeriod.MONTH: "/panel/mix/getMIXEnergyMonthChart",
            EnergyPeriod.YEAR: "/panel/mix/getMIXEnergyYearChart",
            EnergyPeriod.TOTAL: "/panel/mix/getMIXEnergyTotalChart",
        }[self]

    @property
    def date_field(self) -> str:
        """Return the form field carrying the chart date."""
        if self in (EnergyPeriod.DAY, EnergyPeriod.MONTH):
            return "date"
        return "year"

    def format_value(self, value: str | date) -> str:
        """Return a chart date as the portal expects it for this period."""
        if not isinstance(value, date):
            return str(value)
        if self is EnergyPeriod.DAY:
            return value.strftime("%Y-%m-%d")
        if self is EnergyPeriod.MONTH:
            return value.strftime("%Y-%m")
        return value.strftime("%Y")

    def default_value(self) -> str:
        """Return today's date formatted for this period."""
        return self.format_value(date.today())


class GrowattPortal:
    """
    Session-aware client for the Growatt web portal.

    The portal authenticates with a cookie set by ``/login``. The client keeps
    that cookie in its ``requests.Session``, tracks when the login expires and
    logs in again with the stored credentials before any call that finds the
    session missing or expired.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        session_duration: timedelta = DEFAULT_SESSION_DURATION,
        *,
        auto_relogin: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the portal client.

        Args:
            base_url (str): Portal host, defaults to server.growatt.com.
            session_duration (timedelta): How long a login is trusted.
            auto_relogin (bool): Keep the password in memory and log in again
                silently when the session expires.
            timeout (float): Timeout in seconds for every request.
            session (requests.Session, optional): Transport to use.

        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.auto_relogin = auto_relogin
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": self._create_user_agent()})
        self.session = session
        self.credentials: Credentials | None = None
        self.state = SessionState(duration=session_duration)
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: GrowattConfig, **kwargs: Any) -> GrowattPortal:
        """
        Create a client from a loaded configuration.

        Credentials from the configuration are stored but not used until the
        first authenticated call logs in.
        """
        client = cls(
            base_url=config.base_url,
            session_duration=config.session_duration,
            auto_relogin=config.auto_relogin,
            **kwargs,
        )
        if (
            config.auto_relogin
            and config.username is not None
            and config.password is not None
        ):
            client.credentials = Credentials(config.username, config.password)
        return client

    @classmethod
    def from_env(cls, **kwargs: Any) -> GrowattPortal:
        """Create a client configured from GROWATT_* environment variables."""
        return cls.from_config(GrowattConfig.from_env(), **kwargs)

    def with_alternate_url(self) -> GrowattPortal:
        """Switch to the alternate portal host."""
        self.base_url = ALTERNATE_URL
        return self

    def with_session_duration(self, minutes: int) -> GrowattPortal:
        """
        Change how long a login is trusted before logging in again.

        Raises:
            GrowattParameterError: If minutes is not positive.

        """
        if minutes <= 0:
            msg = f"Session duration must be positive, got {minutes} minutes"
            raise GrowattParameterError(msg)
        self.state.duration = timedelta(minutes=minutes)
        return self

    def _create_user_agent(self) -> str:
        python_version = platform.python_version()
        system = platform.system()
        release = platform.release()
        machine = platform.machine()

        return f"Python/{python_version} ({system} {release}; {machine})"

    def _get_url(self, path: str) -> str:
        """Return the full URL of a portal path."""
        return self.base_url + path

    def _browser_headers(self) -> dict[str, str]:
        """Headers that make a request look like a browser navigation."""
        return {
            "Accept-Language": "en-US,en;q=0.9",
            "Upgrade-Insecure-Requests": "1",
            "User-Agent": BROWSER_USER_AGENT,
            "Accept": BROWSER_ACCEPT,
            "Sec-Fetch-Site": "same-origin",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-User": "?1",
            "Sec-Fetch-Dest": "document",
            "Referer": self._get_url("/index"),
        }

    @property
    def token(self) -> str | None:
        """Token returned by the last login, if the portal sent one."""
        return self.state.token

    def get_token(self) -> str | None:
        """Return the token returned by the last login."""
        return self.state.token

    @property
    def is_logged_in(self) -> bool:
        """Whether the last login succeeded and no logout has confirmed since."""
        return self.state.is_logged_in

    def is_session_valid(self) -> bool:
        """Return True if the session expiry lies in the future."""
        return self.state.is_valid()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    # Transport

    def _send(
        self,
        method: str,
        path: str,
        *,
        data: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        allow_redirects: bool = True,
    ) -> requests.Response:
        """
        Send a request to the portal.

        Raises:
            GrowattRequestError: If the request could not be completed.

        """
        _LOGGER.debug("%s %s", method, path)
        try:
            response = self.session.request(
                method,
                self._get_url(path),
                data=data,
                params=params,
                headers=headers,
                timeout=self.timeout,
                allow_redirects=allow_redirects,
            )
        except requests.exceptions.RequestException as err:
            msg = f"{method} {path} failed: {err}"
            raise GrowattRequestError(msg) from err
        _LOGGER.debug("%s %s returned HTTP %s", method, path, response.status_code)
        return response

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as err:
            msg = f"HTTP request failed: {err}"
            raise GrowattRequestError(msg, status_code=response.status_code) from err

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as err:
            msg = f"JSON deserialization error: {err}"
            raise GrowattMalformedJsonError(msg) from err

    # Authentication

    def login(self, username: str, password: str) -> bool:
        """
        Log in to the portal.

        Returns immediately when the current session is still valid. Otherwise
        the credentials are stored for silent re-login (unless auto_relogin is
        disabled) and the hashed password is submitted.

        Args:
            username (str): Account name.
            password (str): Plaintext password; only its MD5 hash is sent.

        Returns:
            bool: True once logged in.

        Raises:
            GrowattRequestError: If the request fails or returns a non-2xx status.
            GrowattMalformedJsonError: If the response is not JSON.
            GrowattAuthenticationError: If the portal rejects the credentials.
            GrowattInvalidResponseError: If the response has no numeric result.

        """
        with self._lock:
            if self.state.is_logged_in and self.state.is_valid():
                _LOGGER.debug(
                    "Session valid until %s, skipping login", self.state.expires_at
                )
                return True

            if self.auto_relogin:
                self.credentials = Credentials(username, password)

            form = {
                "account": username,
                "password": "",
                "validateCode": "",
                "isReadPact": "1",
                "passwordCrc": hash_password(password),
            }
            response = self._send(
                "POST",
                "/login",
                data=form,
                headers={"Content-Type": FORM_CONTENT_TYPE},
            )
            self._raise_for_status(response)
            payload = self._decode(response)

            result = payload.get("result") if isinstance(payload, dict) else None
            if isinstance(result, bool) or not isinstance(result, int):
                self.state.mark_logged_out()
                raise GrowattInvalidResponseError(
                    "missing or non-numeric result field"
                )

            if result != LOGIN_SUCCESS_RESULT:
                msg = payload.get("msg")
                if not isinstance(msg, str):
                    msg = LOGIN_UNKNOWN_ERROR
                _LOGGER.debug("Growatt login failed (result %s): %s", result, msg)
                self.state.mark_logged_out()
                raise GrowattAuthenticationError(msg)

            token = payload.get("token")
            self.state.mark_logged_in(token if isinstance(token, str) else None)
            _LOGGER.info(
                "Logged in to %s as %s, session valid until %s",
                self.base_url,
                username,
                self.state.expires_at,
            )
            return True

    def logout(self) -> bool:
        """
        Log out of the portal.

        The portal confirms a logout with a 302 redirect. Any other status
        leaves the session untouched and is reported as False.

        Returns:
            bool: True if the portal confirmed the logout.

        Raises:
            GrowattRequestError: If the request could not be completed.

        """
        with self._lock:
            if not self.state.is_logged_in:
                _LOGGER.debug("No active session to log out from")
                return False

            response = self._send(
                "GET",
                "/logout",
                headers=self._browser_headers(),
                allow_redirects=False,
            )
            if response.status_code != LOGOUT_SUCCESS_STATUS:
                _LOGGER.warning(
                    "Logout returned unexpected status code: %s", response.status_code
                )
                return False

            self.state.mark_logged_out()
            _LOGGER.info("Logged out from %s", self.base_url)
            return True

    def ensure_session(self) -> None:
        """
        Make sure a usable session exists, logging in again if needed.

        Raises:
            GrowattNotAuthenticatedError: If no session exists and no
                credentials are stored.

        """
        with self._lock:
            if self.state.is_logged_in and self.state.is_valid():
                return
            if self.credentials is None:
                raise GrowattNotAuthenticatedError
            _LOGGER.debug(
                "Session missing or expired, logging in again as %s",
                self.credentials.username,
            )
            self.login(self.credentials.username, self.credentials.password)

    # Validated request pipeline

    def authenticated_call(
        self,
        method: str,
        path: str,
        form_fields: Mapping[str, Any] | None = None,
        unwrap: Unwrap = BARE,
        model: Callable[[Any], T] | None = None,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> T | Any:
        """
        Perform a request that requires a logged-in session.

        Args:
            method (str): HTTP method.
            path (str): Portal path, starting with a slash.
            form_fields (Mapping, optional): Form-encoded request body.
            unwrap (Unwrap): Where the data lives and how emptiness is detected.
            model (Callable, optional): Converts the unwrapped value to a
                typed result. The raw JSON value is returned when omitted.
            params (Mapping, optional): Query string parameters.
            headers (Mapping, optional): Extra request headers.

        Returns:
            The typed result, or the unwrapped JSON value.

        Raises:
            GrowattNotAuthenticatedError: If no session can be established.
            GrowattRequestError: If the request fails or returns a non-2xx status.
            GrowattMalformedJsonError: If the body is not JSON or does not fit
                the model.
            GrowattInvalidResponseError: If the response is empty.

        """
        self.ensure_session()

        response = self._send(
            method, path, data=form_fields, params=params, headers=headers
        )
        self._raise_for_status(response)
        payload = self._decode(response)
        value = unwrap.apply(payload)
        _LOGGER.debug("Unwrapped %s from %s", unwrap.describe(), path)

        if model is None:
            return value
        try:
            return model(value)
        except GrowattError:
            raise
        except (KeyError, TypeError, ValueError) as err:
            msg = f"Response of {path} does not fit the expected shape: {err}"
            raise GrowattMalformedJsonError(msg) from err

    # Plants

    def get_plants(self) -> PlantList:
        """Get all plants of the logged-in account."""
        return self.authenticated_call(
            "POST", "/index/getPlantListTitle", unwrap=ARRAY, model=PlantList.from_list
        )

    def get_plant(self, plant_id: str) -> PlantData:
        """Get summary data of one plant."""
        return self.authenticated_call(
            "POST",
            "/panel/getPlantData",
            params={"plantId": plant_id},
            unwrap=OBJ,
            model=PlantData.from_dict,
        )

    def get_device_list(self, plant_id: str) -> Any:
        """Get the MAX inverters of a plant."""
        return self.authenticated_call(
            "POST",
            "/device/getMAXList",
            {"plantId": plant_id, "currPage": "1"},
        )

    def get_weather(self, plant_id: str) -> Any:
        """Get the environment monitors (weather data) of a plant."""
        return self.authenticated_call(
            "POST",
            "/device/getEnvList",
            {"plantId": plant_id, "currPage": "1"},
        )

    def get_devices_by_plant_list(
        self, plant_id: str, curr_page: int | None = None
    ) -> Any:
        """Get one page of the devices of a plant."""
        return self.authenticated_call(
            "POST",
            "/panel/getDevicesByPlantList",
            {"plantId": plant_id, "currPage": str(curr_page or 1)},
        )

    def get_fault_logs(
        self,
        plant_id: str,
        date: str | date | None = None,  # noqa: A002
        device_sn: str = "",
        page_num: int = 1,
        device_flag: int = 0,
        fault_type: int = 1,
    ) -> Any:
        """
        Get the fault log of a plant.

        Args:
            plant_id (str): Plant to read the log of.
            date (str | date, optional): Day of the log, defaults to today.
            device_sn (str): Restrict the log to one device.
            page_num (int): Page to fetch.
            device_flag (int): Portal device category filter.
            fault_type (int): Portal fault category filter.

        Raises:
            GrowattParameterError: If plant_id is empty.

        """
        if not plant_id:
            msg = "Plant ID must be provided"
            raise GrowattParameterError(msg)
        if date is None:
            date = datetime.now().strftime("%Y-%m-%d")  # noqa: DTZ005

        return self.authenticated_call(
            "POST",
            "/log/getNewPlantFaultLog",
            {
                "deviceSn": device_sn,
                "date": str(date),
                "plantId": plant_id,
                "toPageNum": str(page_num),
                "type": str(fault_type),
                "deviceFlag": str(device_flag),
            },
            headers={
                "Content-Type": FORM_CONTENT_TYPE,
                "X-Requested-With": "XMLHttpRequest",
                "Accept": "application/json, text/javascript, */*; q=0.01",
            },
        )

    get_plant_fault_logs = get_fault_logs

    # MIX devices

    def get_mix_ids(self, plant_id: str) -> Any:
        """Get the MIX devices of a plant."""
        return self.authenticated_call(
            "POST",
            "/panel/getDevicesByPlant",
            params={"plantId": plant_id},
            unwrap=Unwrap.field("obj", "mix"),
        )

    def get_mix_devices(self, plant_id: str) -> list[MixDevice]:
        """Get the MIX devices of a plant as MixDevice handles."""
        devices = []
        for entry in self.get_mix_ids(plant_id):
            serial = entry[0] if isinstance(entry, (list, tuple)) and entry else entry
            if not isinstance(serial, str):
                msg = f"Unexpected MIX device entry: {entry!r}"
                raise GrowattMalformedJsonError(msg)
            devices.append(MixDevice(self, plant_id, serial))
        return devices

    def get_mix_total(self, plant_id: str, mix_sn: str) -> Any:
        """Get the lifetime totals of a MIX device."""
        return self.authenticated_call(
            "POST",
            "/panel/mix/getMIXTotalData",
            {"mixSn": mix_sn},
            params={"plantId": plant_id},
            unwrap=OBJ,
        )

    def get_mix_status(self, plant_id: str, mix_sn: str) -> Any:
        """Get the live status of a MIX device."""
        return self.authenticated_call(
            "POST",
            "/panel/mix/getMIXStatusData",
            {"mixSn": mix_sn},
            params={"plantId": plant_id},
            unwrap=OBJ,
        )

    def get_energy_stats(
        self,
        period: EnergyPeriod,
        plant_id: str,
        mix_sn: str,
        value: str | date | None = None,
    ) -> Any:
        """
        Get an energy chart of a MIX device.

        Args:
            period (EnergyPeriod): Chart granularity.
            plant_id (str): Plant the device belongs to.
            mix_sn (str): Serial number of the MIX device.
            value (str | date, optional): Day (``YYYY-MM-DD``), month
                (``YYYY-MM``) or year (``YYYY``) of the chart, depending on
                the period. Defaults to the current one.

        Raises:
            GrowattParameterError: If period is not an EnergyPeriod.

        """
        if not isinstance(period, EnergyPeriod):
            msg = f"Invalid energy period: {period}"
            raise GrowattParameterError(msg)
        if value is None:
            value = period.default_value()
        else:
            value = period.format_value(value)

        return self.authenticated_call(
            "POST",
            period.chart_path,
            {period.date_field: value, "plantId": plant_id, "mixSn": mix_sn},
        )

    def get_energy_stats_daily(
        self, date: str | date | None, plant_id: str, mix_sn: str  # noqa: A002
    ) -> Any:
        """Get the energy chart of one day."""
        return self.get_energy_stats(EnergyPeriod.DAY, plant_id, mix_sn, date)

    def get_energy_stats_monthly(
        self, date: str | date | None, plant_id: str, mix_sn: str  # noqa: A002
    ) -> Any:
        """Get the energy chart of one month."""
        return self.get_energy_stats(EnergyPeriod.MONTH, plant_id, mix_sn, date)

    def get_energy_stats_yearly(
        self, year: str | date | None, plant_id: str, mix_sn: str
    ) -> Any:
        """Get the energy chart of one year."""
        return self.get_energy_stats(EnergyPeriod.YEAR, plant_id, mix_sn, year)

    def get_energy_stats_total(
        self, year: str | date | None, plant_id: str, mix_sn: str
    ) -> Any:
        """Get the multi-year energy chart."""
        return self.get_energy_stats(EnergyPeriod.TOTAL, plant_id, mix_sn, year)

    def get_weekly_battery_stats(self, plant_id: str, mix_sn: str) -> Any:
        """Get the battery chart of the last week."""
        return self.authenticated_call(
            "POST",
            "/panel/mix/getMIXBatChart",
            {"plantId": plant_id, "mixSn": mix_sn},
        )

    def post_mix_ac_discharge_time_period_now(
        self, plant_id: str, mix_sn: str  # noqa: ARG002
    ) -> Any:
        """Set the system clock of a MIX device to the current local time."""
        now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")  # noqa: DTZ005
        return self.authenticated_call(
            "POST",
            "/tcpSet.do",
            {
                "action": "mixSet",
                "serialNum": mix_sn,
                "type": "pf_sys_year",
                "param1": now,
            },
        )


class MixDevice:
    """A MIX device bound to its plant."""

    def __init__(self, api: GrowattPortal, plant_id: str, mix_sn: str) -> None:
        """
        Initialize a MixDevice handle.

        Args:
            api: The portal client.
            plant_id: Plant the device belongs to.
            mix_sn: Serial number of the device.

        """
        self._api = api
        self.plant_id = plant_id
        self.mix_sn = mix_sn

    def __repr__(self) -> str:
        return f"MixDevice(plant_id={self.plant_id!r}, mix_sn={self.mix_sn!r})"

    def total(self) -> Any:
        """Get lifetime totals."""
        return self._api.get_mix_total(self.plant_id, self.mix_sn)

    def status(self) -> Any:
        """Get live status."""
        return self._api.get_mix_status(self.plant_id, self.mix_sn)

    def energy(self, period: EnergyPeriod, value: str | date | None = None) -> Any:
        """Get an energy chart."""
        return self._api.get_energy_stats(period, self.plant_id, self.mix_sn, value)

    def battery_week(self) -> Any:
        """Get the battery chart of the last week."""
        return self._api.get_weekly_battery_stats(self.plant_id, self.mix_sn)

    def sync_clock(self) -> Any:
        """Set the device clock to the current local time."""
        return self._api.post_mix_ac_discharge_time_period_now(
            self.plant_id, self.mix_sn
        )
