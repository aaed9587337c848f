"""Constants for the Growatt web portal client."""

from datetime import timedelta

DEFAULT_URL = "https://server.growatt.com"
ALTERNATE_URL = "https://openapi.growatt.com"

# Preset names accepted wherever a base URL is configured
SERVER_URLS = {
    "default": DEFAULT_URL,
    "alternate": ALTERNATE_URL,
}

DEFAULT_SESSION_DURATION = timedelta(minutes=30)
DEFAULT_TIMEOUT = 30

# The portal reports a successful login with result == 1
LOGIN_SUCCESS_RESULT = 1
LOGIN_UNKNOWN_ERROR = "Unknown error"

# Logout answers with a redirect to the login page when it took effect
LOGOUT_SUCCESS_STATUS = 302

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/135.0.0.0 Safari/537.36"
)
BROWSER_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
    "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
)

ENV_USERNAME = "GROWATT_USERNAME"
ENV_PASSWORD = "GROWATT_PASSWORD"
ENV_BASE_URL = "GROWATT_BASE_URL"
ENV_SESSION_DURATION = "GROWATT_SESSION_DURATION"
ENV_AUTO_RELOGIN = "GROWATT_AUTO_RELOGIN"
