import logging
from typing import ClassVar, Dict, List

from botocore.exceptions import ClientError

from cloudfront_provider.cloudfront_client import CloudFrontClient
from cloudfront_provider.json_bender import Bender, EmptyToNone, S
from cloudfront_provider.mapping import Block, Unblock
from cloudfront_provider.resource.base import CloudFrontApiSpec, CloudFrontResource
from cloudfront_provider.resource_data import ResourceData
from cloudfront_provider.schema import Schema, SchemaMap, SchemaType, block
from cloudfront_provider.validation import string_in_slice

log = logging.getLogger("cloudfront_provider")

RealtimeMetricsSubscriptionStatus = ["Enabled", "Disabled"]


class AwsCloudFrontMonitoringSubscription(CloudFrontResource):
    kind: ClassVar[str] = "aws_cloudfront_monitoring_subscription"
    kind_display: ClassVar[str] = "AWS CloudFront Monitoring Subscription"
    kind_description: ClassVar[str] = (
        "A monitoring subscription enables additional real-time CloudWatch metrics for a CloudFront distribution."
    )
    not_found_errors = {"NoSuchDistribution", "NoSuchMonitoringSubscription"}
    schema: ClassVar[SchemaMap] = {
        "distribution_id": Schema(type=SchemaType.string, required=True, force_new=True),
        "monitoring_subscription": block(
            {
                "realtime_metrics_subscription_config": block(
                    {
                        "realtime_metrics_subscription_status": Schema(
                            type=SchemaType.string,
                            required=True,
                            validate=string_in_slice(RealtimeMetricsSubscriptionStatus),
                        )
                    },
                    required=True,
                    min_items=1,
                )
            },
            required=True,
            min_items=1,
        ),
    }
    expand_mapping: ClassVar[Dict[str, Bender]] = {
        "RealtimeMetricsSubscriptionConfig": S("realtime_metrics_subscription_config")
        >> Unblock({"RealtimeMetricsSubscriptionStatus": S("realtime_metrics_subscription_status") >> EmptyToNone}),
    }
    flatten_mapping: ClassVar[Dict[str, Bender]] = {
        "monitoring_subscription": S("MonitoringSubscription")
        >> Block(
            {
                "realtime_metrics_subscription_config": S("RealtimeMetricsSubscriptionConfig")
                >> Block({"realtime_metrics_subscription_status": S("RealtimeMetricsSubscriptionStatus")})
            },
            keep_empty=True,
        ),
    }
    api_spec: ClassVar[List[CloudFrontApiSpec]] = [
        CloudFrontApiSpec("create-monitoring-subscription"),
        CloudFrontApiSpec("get-monitoring-subscription"),
        CloudFrontApiSpec("delete-monitoring-subscription"),
    ]

    @classmethod
    def create(cls, client: CloudFrontClient, d: ResourceData) -> None:
        distribution_id = d.get("distribution_id")
        log.info(f"Creating {cls.kind_display}: {distribution_id}")
        subscription = S("monitoring_subscription") >> Unblock(cls.expand_mapping)
        try:
            client.call(
                "create-monitoring-subscription",
                DistributionId=distribution_id,
                MonitoringSubscription=subscription(d.to_json()) or {},
            )
        except ClientError as e:
            raise cls.operation_error("creating", distribution_id, e) from e
        d.set_id(distribution_id)
        cls.read(client, d)

    @classmethod
    def read(cls, client: CloudFrontClient, d: ResourceData) -> None:
        output = cls.read_remote(
            d, lambda: cls.find(client, "get-monitoring-subscription", "MonitoringSubscription", DistributionId=d.id)
        )
        if output is None:
            return
        cls.flatten(d, output)

    @classmethod
    def update(cls, client: CloudFrontClient, d: ResourceData) -> None:
        # the subscription of a distribution is replaced as a whole
        cls.create(client, d)

    @classmethod
    def delete(cls, client: CloudFrontClient, d: ResourceData) -> None:
        cls.delete_remote(client, d, "delete-monitoring-subscription", DistributionId=d.id)

    @classmethod
    def import_state(cls, client: CloudFrontClient, d: ResourceData) -> ResourceData:
        d.set("distribution_id", d.id)
        return d
