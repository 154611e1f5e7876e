"""SDK version and user agent."""

VERSION = "0.0.1"
VERSION_CODE = "1"
USER_AGENT = f"HookmeClient:sdk-py/{VERSION}-{VERSION_CODE}"
