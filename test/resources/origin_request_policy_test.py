import pytest

from cloudfront_provider.errors import SchemaValidationError
from cloudfront_provider.provider import CloudFrontProvider
from cloudfront_provider.resource.origin_request_policy import AwsCloudFrontOriginRequestPolicy
from cloudfront_provider.resource_data import ResourceData
from test import boto_session, cloudfront_client, cloudfront_config, provider  # noqa: F401
from test.resources import BotoFileBasedSession

kind = AwsCloudFrontOriginRequestPolicy.kind
policy_id = "acba4595-bd28-49b8-b9fe-13317c0390fa"
config = {
    "name": "example-policy",
    "comment": "example comment",
    "cookies_config": [{"cookie_behavior": "none"}],
    "headers_config": [{"header_behavior": "whitelist", "headers": [{"items": ["example"]}]}],
    "query_strings_config": [{"query_string_behavior": "whitelist", "query_strings": [{"items": ["example"]}]}],
}
state = {
    "id": policy_id,
    "comment": "example comment",
    "cookies_config": [{"cookie_behavior": "none", "cookies": []}],
    "etag": "E3UN6WX5RRO2AG",
    "headers_config": [{"header_behavior": "whitelist", "headers": [{"items": ["example"]}]}],
    "name": "example-policy",
    "query_strings_config": [{"query_string_behavior": "whitelist", "query_strings": [{"items": ["example"]}]}],
}


def test_expand() -> None:
    d = ResourceData(AwsCloudFrontOriginRequestPolicy.schema, config=config)
    assert AwsCloudFrontOriginRequestPolicy.expand(d) == {
        "Comment": "example comment",
        "CookiesConfig": {"CookieBehavior": "none"},
        "HeadersConfig": {"HeaderBehavior": "whitelist", "Headers": {"Quantity": 1, "Items": ["example"]}},
        "Name": "example-policy",
        "QueryStringsConfig": {
            "QueryStringBehavior": "whitelist",
            "QueryStrings": {"Quantity": 1, "Items": ["example"]},
        },
    }


def test_validate(provider: CloudFrontProvider) -> None:
    provider.validate(kind, config)
    provider.validate(kind, {**config, "headers_config": [{"header_behavior": "allViewerAndWhitelistCloudFront"}]})
    missing = {key: value for key, value in config.items() if key != "cookies_config"}
    with pytest.raises(SchemaValidationError) as ex:
        provider.validate(kind, missing)
    assert ex.value.errors == ['The argument "cookies_config" is required, but no definition was found.']
    with pytest.raises(SchemaValidationError):
        provider.validate(kind, {**config, "headers_config": [{"header_behavior": "all"}]})


def test_create_read_update_delete(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    created = provider.create(kind, config)
    assert created == state
    assert boto_session.args_of("create-origin-request-policy")["OriginRequestPolicyConfig"]["Name"] == "example-policy"
    assert provider.read(kind, state) == state
    provider.update(kind, state, {**config, "comment": "other"})
    args = boto_session.args_of("update-origin-request-policy")
    assert args["IfMatch"] == "E3UN6WX5RRO2AG"
    assert args["OriginRequestPolicyConfig"]["Comment"] == "other"
    provider.delete(kind, state)
    assert boto_session.args_of("delete-origin-request-policy") == {"Id": policy_id, "IfMatch": "E3UN6WX5RRO2AG"}


def test_import(provider: CloudFrontProvider) -> None:
    assert provider.import_state(kind, policy_id) == state
