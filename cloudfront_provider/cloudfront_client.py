from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Collection, List, Optional

from botocore.config import Config
from botocore.exceptions import ClientError
from botocore.response import StreamingBody
from prometheus_client import Counter
from retrying import retry

from cloudfront_provider.configuration import CloudFrontConfig
from cloudfront_provider.types import Json, JsonElement

log = logging.getLogger("cloudfront_provider")

ThrottlingErrors = {
    "RequestThrottled",
    "RequestThrottledException",
    "ThrottledException",
    "Throttling",
    "ThrottlingException",
}
RetryableErrors = ThrottlingErrors | {
    "RequestLimitExceeded",
    "RequestTimeout",
    "RequestTimeoutException",
    "ServiceUnavailable",
    "TooManyRequestsException",
}
AuthErrors = {
    "AccessDenied",
    "AuthorizationError",
    "AuthFailure",
    "InvalidClientTokenId",
    "UnrecognizedClientException",
}

metrics_api_calls = Counter(
    "cloudfront_provider_api_calls_total",
    "Number of calls to the CloudFront API",
    ["action"],
)
metrics_api_errors = Counter(
    "cloudfront_provider_api_errors_total",
    "Number of calls to the CloudFront API that returned an error",
    ["action", "code"],
)

UTC_Date_Format = "%Y-%m-%dT%H:%M:%SZ"


def utc_str(dt: datetime) -> str:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime(UTC_Date_Format)


def error_code(e: Exception) -> str:
    if isinstance(e, ClientError):
        return e.response.get("Error", {}).get("Code") or "Unknown Code"
    return ""


def error_message(e: Exception) -> str:
    if isinstance(e, ClientError):
        return e.response.get("Error", {}).get("Message") or str(e)
    return str(e)


def is_not_found(e: Exception, codes: Collection[str]) -> bool:
    """
    CloudFront reports missing objects with a NoSuch* error code.
    Some operations answer with InvalidInput and a message that mentions the missing object instead.
    """
    code = error_code(e)
    return code in codes or (code == "InvalidInput" and "not found" in error_message(e))


def is_retryable_exception(e: Exception) -> bool:
    if isinstance(e, ClientError) and error_code(e) in RetryableErrors:
        log.debug("CloudFront API request limit exceeded or throttling, retrying with exponential backoff")
        return True
    return False


def value_in_path(element: JsonElement, path_or_name: str) -> Optional[Any]:
    """
    Access a value in a json object by a path with dots as separator.
    {"a": {"b": {"c": 1}}} -> value_in_path({"a": {"b": {"c": 1}}}, "a.b.c") -> 1
    """
    current: Any = element
    for name in path_or_name.split("."):
        if not isinstance(current, dict) or name not in current:
            return None
        current = current[name]
    return current


class CloudFrontClient:
    """
    The single entry point to the CloudFront API.
    Every response is converted to plain json, so it can be bent into resource state.
    """

    service = "cloudfront"

    def __init__(self, config: CloudFrontConfig) -> None:
        self.config = config

    def __to_json(self, node: Any) -> JsonElement:
        if node is None or isinstance(node, (str, int, float, bool)):
            return node
        elif isinstance(node, list):
            return [self.__to_json(item) for item in node]
        elif isinstance(node, dict):
            return {key: self.__to_json(value) for key, value in node.items() if key != "ResponseMetadata"}
        elif isinstance(node, datetime):
            return utc_str(node)
        elif isinstance(node, bytes):
            return node.decode("utf-8")
        elif isinstance(node, StreamingBody):
            return node.read().decode("utf-8")
        else:
            raise AttributeError(f"Unsupported type: {type(node)}")

    @staticmethod
    def __arg_info(kwargs: Json) -> str:
        def short(value: Any) -> str:
            as_str = repr(value)
            return as_str if len(as_str) <= 80 else as_str[:77] + "..."

        if not kwargs:
            return ""
        return " with args " + ", ".join(f"{key}={short(value)}" for key, value in kwargs.items())

    def call_single(self, action: str, result_name: Optional[str] = None, **kwargs: Any) -> JsonElement:
        arg_info = self.__arg_info(kwargs)
        log.debug(f"[CloudFront] calling action={action}{arg_info}")
        py_action = action.replace("-", "_")
        # adaptive mode allows automated client-side throttling
        config = Config(retries={"max_attempts": self.config.max_attempts, "mode": "adaptive"})
        client = self.config.sessions().client(
            self.service, region_name=self.config.region, config=config, partition=self.config.partition
        )
        metrics_api_calls.labels(action=action).inc()
        try:
            result = getattr(client, py_action)(**kwargs)
            single: Json = self.__to_json(result)  # type: ignore
            log.debug(f"[CloudFront] called action={action}{arg_info}: single result")
            return value_in_path(single, result_name) if result_name else single
        except ClientError as e:
            metrics_api_errors.labels(action=action, code=error_code(e)).inc()
            raise
        finally:
            client.close()

    @retry(  # type: ignore
        stop_max_attempt_number=10,  # 10 attempts: 1000 max 60000: max wait time is 5 minutes
        wait_exponential_multiplier=1000,
        wait_exponential_max=60000,
        retry_on_exception=is_retryable_exception,
    )
    def call(
        self,
        action: str,
        result_name: Optional[str] = None,
        expected_errors: Optional[List[str]] = None,
        **kwargs: Any,
    ) -> JsonElement:
        try:
            return self.call_single(action, result_name, **kwargs)
        except ClientError as e:
            expected_errors = expected_errors or []
            code = error_code(e)
            if code in expected_errors:
                log.debug(f"Expected error: {code}")
                return None
            self.__log_client_error(e, action)
            raise

    def __log_client_error(self, e: ClientError, action: str) -> None:
        code = error_code(e)
        if code in AuthErrors or code.lower().startswith("accessdenied"):
            log.warning(f"Access denied to call CloudFront action {action} with code {code}: {e}")
        elif code in RetryableErrors:
            log.info(f"Call to CloudFront action {action} was throttled and will be retried. Error: {e}")
        else:
            log.debug(f"Call to CloudFront action {action} failed with code {code}: {e}")
