"""Client for the datasource resource endpoints."""

from whenkit_client.types import NamedItem, ValidateConditionRequest, ValidationResult
from whenkit_client.errors import (
    ClientError,
    RequestError,
    InvalidRequestError,
    AuthenticationError,
    AccessDeniedError,
    NotFoundError,
    ServerError,
    RequestTimeoutError,
    NetworkError,
    ConfigurationError,
)
from whenkit_client.client import DatasourceClient
