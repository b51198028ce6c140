import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, SecretStr, ValidationError

from kview.errors import InvalidConfigError, MissingConfigError

REQUIRED_ENV_VARS = [
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_DEFAULT_REGION",
    "AWS_KINESIS_STREAM_NAME",
]

DEFAULT_POLL_INTERVAL = 1.0


class ViewerSettings(BaseModel):
    """
    Resolved configuration for one viewer process. Immutable once built.

    Attributes:
        access_key_id (str): AWS credential identifier.
        secret_access_key (SecretStr): AWS credential secret.
        region (str): AWS region hosting the stream.
        stream_name (str): Name of the Kinesis stream to tail.
        session_token (SecretStr): Optional session token for temporary credentials.
        endpoint_url (str): Optional alternate endpoint (e.g. LocalStack).
        poll_interval (float): Seconds to pause between GetRecords calls.
    """
    model_config = {"frozen": True}

    access_key_id: str
    secret_access_key: SecretStr
    region: str
    stream_name: str
    session_token: Optional[SecretStr] = None
    endpoint_url: Optional[str] = None
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)

    def describe(self) -> List[str]:
        """Lines echoed in the startup banner. The secret is masked."""
        return [
            f"AWS_ACCESS_KEY_ID: {self.access_key_id}",
            f"AWS_SECRET_ACCESS_KEY: {mask_secret(self.secret_access_key.get_secret_value())}",
            f"AWS_DEFAULT_REGION: {self.region}",
            f"AWS_KINESIS_STREAM_NAME: {self.stream_name}",
        ]


def mask_secret(value: str, visible: int = 4) -> str:
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def find_missing(environ: Mapping[str, str]) -> List[str]:
    return [key for key in REQUIRED_ENV_VARS if not environ.get(key)]


def resolve_settings(environ: Optional[Mapping[str, str]] = None) -> ViewerSettings:
    """
    Build ViewerSettings from the process environment.

    Raises:
        MissingConfigError: if any required variable is unset or empty. Every
            missing key is reported, in declaration order.
        InvalidConfigError: if an optional variable cannot be parsed.
    """
    if environ is None:
        environ = os.environ

    missing = find_missing(environ)
    if missing:
        raise MissingConfigError(missing)

    try:
        return ViewerSettings(
            access_key_id=environ["AWS_ACCESS_KEY_ID"],
            secret_access_key=environ["AWS_SECRET_ACCESS_KEY"],
            region=environ["AWS_DEFAULT_REGION"],
            stream_name=environ["AWS_KINESIS_STREAM_NAME"],
            session_token=environ.get("AWS_SESSION_TOKEN") or None,
            endpoint_url=environ.get("AWS_ENDPOINT_URL") or None,
            poll_interval=environ.get("KVIEW_POLL_INTERVAL") or DEFAULT_POLL_INTERVAL,
        )
    except ValidationError as e:
        raise InvalidConfigError(str(e)) from e
