import logging
from typing import Dict, List, Optional, Type

from botocore.exceptions import ClientError
from prometheus_client import Summary

from cloudfront_provider.cloudfront_client import CloudFrontClient, error_message
from cloudfront_provider.configuration import CloudFrontConfig
from cloudfront_provider.errors import (
    NotFoundError,
    ProviderError,
    ResourceOperationError,
    SchemaValidationError,
    UnknownResourceKindError,
)
from cloudfront_provider.resource.base import CloudFrontApiSpec, CloudFrontResource
from cloudfront_provider.resource.cache_policy import AwsCloudFrontCachePolicy
from cloudfront_provider.resource.function import AwsCloudFrontFunction
from cloudfront_provider.resource.monitoring_subscription import AwsCloudFrontMonitoringSubscription
from cloudfront_provider.resource.origin_request_policy import AwsCloudFrontOriginRequestPolicy
from cloudfront_provider.resource.public_key import AwsCloudFrontPublicKey
from cloudfront_provider.resource.response_headers_policy import AwsCloudFrontResponseHeadersPolicy
from cloudfront_provider.resource_data import ResourceData
from cloudfront_provider.schema import SchemaMap, validate_config
from cloudfront_provider.types import Json

log = logging.getLogger("cloudfront_provider")

metrics_operation = Summary(
    "cloudfront_provider_operation_seconds",
    "Time it took to run a lifecycle operation of a resource",
    ["kind", "operation"],
)

all_resources: List[Type[CloudFrontResource]] = [
    AwsCloudFrontCachePolicy,
    AwsCloudFrontFunction,
    AwsCloudFrontMonitoringSubscription,
    AwsCloudFrontOriginRequestPolicy,
    AwsCloudFrontPublicKey,
    AwsCloudFrontResponseHeadersPolicy,
]


def iam_statement(name: str, apis: List[CloudFrontApiSpec]) -> Json:
    permissions = {api.iam_permission() for api in apis}
    return {
        "PolicyName": name,
        "PolicyDocument": {
            "Version": "2012-10-17",
            "Statement": [{"Effect": "Allow", "Resource": "*", "Action": sorted(permissions)}],
        },
    }


class CloudFrontProvider:
    """
    Runs the lifecycle operations of all CloudFront resources.
    Every operation takes and returns plain json: the configuration of a resource and its state.
    """

    def __init__(self, config: CloudFrontConfig, client: Optional[CloudFrontClient] = None) -> None:
        self.config = config
        self.client = client or CloudFrontClient(config)
        self.resources: Dict[str, Type[CloudFrontResource]] = {r.kind: r for r in all_resources}

    def resource_type(self, kind: str) -> Type[CloudFrontResource]:
        if kind not in self.resources:
            raise UnknownResourceKindError(f"Unknown resource kind: {kind}. Known: {', '.join(sorted(self.resources))}")
        return self.resources[kind]

    def schema(self, kind: str) -> SchemaMap:
        return self.resource_type(kind).schema

    def validate(self, kind: str, config: Json) -> None:
        errors = validate_config(self.schema(kind), config)
        if errors:
            raise SchemaValidationError(kind, errors)

    def create(self, kind: str, config: Json) -> Optional[Json]:
        resource = self.resource_type(kind)
        self.validate(kind, config)
        d = ResourceData(resource.schema, config=config)
        d.mark_new_resource()
        with metrics_operation.labels(kind=kind, operation="create").time():
            try:
                resource.create(self.client, d)
            except (ProviderError, ClientError) as e:
                if not d.id:
                    raise
                # the remote object exists: keep its id, so it can be read, updated or deleted later
                log.warning(f"{resource.kind_display} ({d.id}) was created, but the creation did not complete")
                raise ResourceOperationError(error_message(e), state=d.state()) from e
        return d.state()

    def read(self, kind: str, state: Json) -> Optional[Json]:
        resource = self.resource_type(kind)
        d = ResourceData(resource.schema, state=state)
        with metrics_operation.labels(kind=kind, operation="read").time():
            resource.read(self.client, d)
        return d.state()

    def requires_replacement(self, kind: str, state: Json, config: Json) -> List[str]:
        resource = self.resource_type(kind)
        d = ResourceData(resource.schema, config=config, state=state)
        return [name for name, schema in resource.schema.items() if schema.force_new and d.has_change(name)]

    def update(self, kind: str, state: Json, config: Json) -> Optional[Json]:
        resource = self.resource_type(kind)
        self.validate(kind, config)
        replace = self.requires_replacement(kind, state, config)
        if replace:
            log.info(f"{resource.kind_display} ({state.get('id')}) needs to be replaced: {', '.join(replace)} changed")
            self.delete(kind, state)
            return self.create(kind, config)
        d = ResourceData(resource.schema, config=config, state=state)
        with metrics_operation.labels(kind=kind, operation="update").time():
            resource.update(self.client, d)
        return d.state()

    def delete(self, kind: str, state: Json) -> None:
        resource = self.resource_type(kind)
        d = ResourceData(resource.schema, state=state)
        with metrics_operation.labels(kind=kind, operation="delete").time():
            resource.delete(self.client, d)

    def import_state(self, kind: str, resource_id: str) -> Json:
        resource = self.resource_type(kind)
        d = ResourceData(resource.schema, resource_id=resource_id)
        with metrics_operation.labels(kind=kind, operation="import").time():
            d = resource.import_state(self.client, d)
            resource.read(self.client, d)
        state = d.state()
        if state is None:
            raise NotFoundError(f"Cannot import non-existent remote object: {resource.kind_display} ({resource_id})")
        return state

    def iam_policy(self, kinds: Optional[List[str]] = None) -> Json:
        """
        The IAM policy that allows all API calls of the given kinds (all kinds if not defined).
        """
        resources = [self.resource_type(kind) for kind in kinds] if kinds else all_resources
        return iam_statement("CloudFrontProvider", [spec for r in resources for spec in r.api_spec])
