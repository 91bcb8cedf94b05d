import pytest

from cloudfront_provider.errors import NotFoundError, ResourceOperationError, SchemaValidationError
from cloudfront_provider.provider import CloudFrontProvider
from cloudfront_provider.resource.monitoring_subscription import AwsCloudFrontMonitoringSubscription
from test import boto_session, cloudfront_client, cloudfront_config, provider  # noqa: F401
from test.resources import BotoFileBasedSession, client_error, file_based_config

kind = AwsCloudFrontMonitoringSubscription.kind
distribution_id = "E1ABCDEFGHIJKL"


def subscription(status: str) -> list:
    return [{"realtime_metrics_subscription_config": [{"realtime_metrics_subscription_status": status}]}]


config = {"distribution_id": distribution_id, "monitoring_subscription": subscription("Enabled")}
state = {"id": distribution_id, **config}


def test_create(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    assert provider.create(kind, config) == state
    assert boto_session.actions() == ["create-monitoring-subscription", "get-monitoring-subscription"]
    assert boto_session.args_of("create-monitoring-subscription") == {
        "DistributionId": distribution_id,
        "MonitoringSubscription": {
            "RealtimeMetricsSubscriptionConfig": {"RealtimeMetricsSubscriptionStatus": "Enabled"}
        },
    }


def test_validate(provider: CloudFrontProvider) -> None:
    provider.validate(kind, config)
    with pytest.raises(SchemaValidationError):
        provider.validate(kind, {**config, "monitoring_subscription": subscription("On")})
    with pytest.raises(SchemaValidationError) as ex:
        provider.validate(kind, {"distribution_id": distribution_id})
    assert ex.value.errors == ['The argument "monitoring_subscription" is required, but no definition was found.']


def test_update(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    changed = {**config, "monitoring_subscription": subscription("Disabled")}
    assert provider.requires_replacement(kind, state, changed) == []
    provider.update(kind, state, changed)
    sent = boto_session.args_of("create-monitoring-subscription")["MonitoringSubscription"]
    assert sent == {"RealtimeMetricsSubscriptionConfig": {"RealtimeMetricsSubscriptionStatus": "Disabled"}}
    # another distribution replaces the subscription
    other = {**config, "distribution_id": "E2OTHER"}
    assert provider.requires_replacement(kind, state, other) == ["distribution_id"]


def test_read(provider: CloudFrontProvider) -> None:
    assert provider.read(kind, state) == state
    gone = BotoFileBasedSession(errors={"get-monitoring-subscription": client_error("NoSuchMonitoringSubscription")})
    assert CloudFrontProvider(file_based_config(gone)).read(kind, state) is None


def test_delete(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    provider.delete(kind, state)
    assert boto_session.args_of("delete-monitoring-subscription") == {"DistributionId": distribution_id}
    gone = BotoFileBasedSession(errors={"delete-monitoring-subscription": client_error("NoSuchDistribution")})
    CloudFrontProvider(file_based_config(gone)).delete(kind, state)
    denied = BotoFileBasedSession(errors={"delete-monitoring-subscription": client_error("AccessDenied")})
    with pytest.raises(ResourceOperationError):
        CloudFrontProvider(file_based_config(denied)).delete(kind, state)


def test_import(provider: CloudFrontProvider) -> None:
    assert provider.import_state(kind, distribution_id) == state
    with pytest.raises(NotFoundError):
        provider.import_state(kind, "EMISSING")
