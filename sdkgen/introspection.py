"""Schema introspection over GraphQL.

Runs the standard introspection query against a live API endpoint and
turns the response into a :class:`~sdkgen.codegen.core.schema.Schema`.
"""

import json
from typing import Any
from urllib.parse import urlparse

import requests

from .codegen.core.errors import IntrospectionError
from .codegen.core.schema import Schema
from .logging_config import get_logger

logger = get_logger(__name__)

INTROSPECTION_OP_NAME = "IntrospectionQuery"

INTROSPECTION_QUERY = """
query IntrospectionQuery {
  __schemaVersion
  __schema {
    queryType { name }
    mutationType { name }
    subscriptionType { name }
    types {
      ...FullType
    }
  }
}

fragment FullType on __Type {
  kind
  name
  description
  fields(includeDeprecated: true) {
    name
    description
    args {
      ...InputValue
    }
    type {
      ...TypeRef
    }
    isDeprecated
    deprecationReason
  }
  inputFields {
    ...InputValue
  }
  interfaces {
    ...TypeRef
  }
  enumValues(includeDeprecated: true) {
    name
    description
    isDeprecated
    deprecationReason
  }
  possibleTypes {
    ...TypeRef
  }
}

fragment InputValue on __InputValue {
  name
  description
  type { ...TypeRef }
  defaultValue
}

fragment TypeRef on __Type {
  kind
  name
  ofType {
    kind
    name
    ofType {
      kind
      name
      ofType {
        kind
        name
        ofType {
          kind
          name
        }
      }
    }
  }
}
"""


class EngineConnection:
    """A live connection to a GraphQL API endpoint."""

    def __init__(
        self,
        endpoint: str,
        token: str | None = None,
        timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the connection.

        Args:
            endpoint: Full URL of the GraphQL endpoint.
            token: Optional session token, sent as basic auth username.
            timeout: Request timeout in seconds.
            session: Optional pre-configured requests session.

        Raises:
            IntrospectionError: If the endpoint is not a valid URL.
        """
        parsed_url = urlparse(endpoint)
        if not all([parsed_url.scheme, parsed_url.netloc]):
            raise IntrospectionError(f"Invalid endpoint URL: {endpoint}")

        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.auth = (token, "")

    def do(self, query: str, op_name: str | None = None) -> dict[str, Any]:
        """Execute a GraphQL request and return its ``data`` object.

        Raises:
            IntrospectionError: On transport, HTTP, JSON or GraphQL errors.
        """
        payload: dict[str, Any] = {"query": query}
        if op_name:
            payload["operationName"] = op_name

        logger.debug(f"Sending {op_name or 'query'} to {self.endpoint}")

        try:
            response = self.session.post(
                self.endpoint, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout for {self.endpoint}")
            raise IntrospectionError(
                f"Request timeout after {self.timeout}s for {self.endpoint}"
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error for {self.endpoint}: {e}")
            raise IntrospectionError(f"Connection error for {self.endpoint}") from e
        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error {e.response.status_code} for {self.endpoint}")
            raise IntrospectionError(
                f"HTTP error {e.response.status_code} for {self.endpoint}"
            ) from e
        except ValueError as e:
            logger.error(f"Invalid JSON response from {self.endpoint}: {e}")
            raise IntrospectionError(
                f"Invalid JSON response from {self.endpoint}: {e}"
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error for {self.endpoint}: {e}", exc_info=True)
            raise IntrospectionError(f"Request error for {self.endpoint}: {e}") from e

        if not isinstance(body, dict):
            raise IntrospectionError(f"Unexpected response from {self.endpoint}")

        errors = body.get("errors")
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            logger.error(f"GraphQL errors from {self.endpoint}: {messages}")
            raise IntrospectionError(f"{op_name or 'query'} failed: {messages}")

        return body.get("data") or {}

    def close(self) -> None:
        self.session.close()


def parse_introspection_response(data: Any) -> tuple[Schema, str]:
    """Turn a decoded introspection response into (schema, version).

    Accepts the response with or without the GraphQL ``data`` envelope.

    Raises:
        IntrospectionError: If the response has no ``__schema`` object or
            the schema cannot be decoded.
    """
    if isinstance(data, dict) and "data" in data and "__schema" not in data:
        data = data["data"]

    if not isinstance(data, dict) or not isinstance(data.get("__schema"), dict):
        raise IntrospectionError("Introspection response has no __schema object")

    try:
        schema = Schema.from_dict(data["__schema"])
    except (KeyError, TypeError, ValueError) as e:
        raise IntrospectionError(f"Malformed introspection schema: {e!r}") from e

    return schema, str(data.get("__schemaVersion") or "")


def parse_introspection_json(payload: str | bytes) -> tuple[Schema, str]:
    """Decode a pre-computed introspection JSON payload."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise IntrospectionError(f"Invalid introspection JSON: {e}") from e
    return parse_introspection_response(data)


def introspect(connection: EngineConnection) -> tuple[Schema, str]:
    """Fetch the schema and its version tag from a live connection.

    Raises:
        IntrospectionError: Wrapping the transport or query failure.
    """
    data = connection.do(INTROSPECTION_QUERY, op_name=INTROSPECTION_OP_NAME)
    schema, version = parse_introspection_response(data)
    logger.info(
        f"Introspected {len(schema.types)} types from {connection.endpoint}"
        f" (version {version or 'unknown'})"
    )
    return schema, version
