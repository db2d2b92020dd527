# /config/custom_components/airthings_cloud/const.py

import datetime
import logging
from typing import Final

DOMAIN: Final = "airthings_cloud"
_LOGGER = logging.getLogger(__package__)

# --- HTTP API Constants ---
ACCOUNTS_BASE_URL: Final = "https://accounts-api.airthings.com"
WEB_API_BASE_URL: Final = "https://web-api.airthin.gs"
URL_TOKEN: Final = f"{ACCOUNTS_BASE_URL}/v1/token"
URL_AUTHORIZE: Final = (
    f"{ACCOUNTS_BASE_URL}/v1/authorize"
    "?client_id=dashboard&redirect_uri=https%3A%2F%2Fdashboard.airthings.com"
)
URL_LATEST_SAMPLES: Final = WEB_API_BASE_URL + "/v1/devices/{device_id}/segments/latest/samples"

LOGIN_CLIENT_ID: Final = "accounts"
DASHBOARD_CLIENT_ID: Final = "dashboard"
DASHBOARD_CLIENT_SECRET: Final = "e333140d-4a85-4e3e-8cf2-bd0a6c710aaa"
DASHBOARD_REDIRECT_URI: Final = "https://dashboard.airthings.com"
DASHBOARD_SCOPE: Final = ["dashboard"]

REQUEST_TIMEOUT: Final = 60  # seconds, per request
SAMPLE_WINDOW: Final = datetime.timedelta(hours=1)
SAMPLE_TIME_FORMAT: Final = "%Y-%m-%dT%H:%M:%S"

# --- Configuration Keys ---
CONF_USERNAME: Final = "username"
CONF_PASSWORD: Final = "password"
CONF_DEVICE_ID: Final = "device_id"
CONF_POLL_INTERVAL: Final = "poll_interval"
CONF_DEBUG: Final = "debug"

# --- Polling ---
POLL_INTERVALS: Final = {
    "5 Minutes": datetime.timedelta(minutes=5),
    "10 Minutes": datetime.timedelta(minutes=10),
    "15 Minutes": datetime.timedelta(minutes=15),
    "30 Minutes": datetime.timedelta(minutes=30),
    "1 Hour": datetime.timedelta(hours=1),
    "3 Hours": datetime.timedelta(hours=3),
}
DEFAULT_POLL_INTERVAL: Final = "5 Minutes"

# --- Services ---
SERVICE_POLL_NOW: Final = "poll_now"

# --- Upstream sensor types (compared case-insensitively) ---
SENSOR_TYPE_RADON_SHORT_TERM: Final = "radonshorttermavg"
SENSOR_TYPE_TEMP: Final = "temp"
SENSOR_TYPE_HUMIDITY: Final = "humidity"
SENSOR_TYPE_PRESSURE: Final = "pressure"
SENSOR_TYPE_CO2: Final = "co2"
SENSOR_TYPE_VOC: Final = "voc"

# --- Channel Keys ---
KEY_BATTERY: Final = "battery"
KEY_TEMPERATURE: Final = "temperature"
KEY_HUMIDITY: Final = "humidity"
KEY_PRESSURE: Final = "pressure"
KEY_CARBON_DIOXIDE: Final = "carbonDioxide"
KEY_TVOC: Final = "tVOC"
KEY_RADON_SHORT_TERM_AVG: Final = "radonShortTermAvg"
KEY_LAST_UPDATE: Final = "lastUpdate"

# --- Units as reported by the upstream dashboard ---
UNIT_PCI_PER_LITER: Final = "pCi/L"

# --- Response fields ---
FIELD_ACCESS_TOKEN: Final = "access_token"
FIELD_REDIRECT_URI: Final = "redirect_uri"
FIELD_SENSORS: Final = "sensors"
FIELD_BATTERY_PERCENTAGE: Final = "batteryPercentage"
