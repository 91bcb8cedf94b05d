import pytest

from cloudfront_provider.errors import SchemaValidationError
from cloudfront_provider.provider import CloudFrontProvider
from cloudfront_provider.resource.response_headers_policy import AwsCloudFrontResponseHeadersPolicy
from cloudfront_provider.resource_data import ResourceData
from test import boto_session, cloudfront_client, cloudfront_config, provider  # noqa: F401
from test.resources import BotoFileBasedSession

kind = AwsCloudFrontResponseHeadersPolicy.kind
policy_id = "67f7725c-6f97-4210-82d7-5512b31e9d03"
config = {
    "name": "example-headers-policy",
    "comment": "test comment",
    "cors_config": [
        {
            "access_control_allow_credentials": True,
            "access_control_allow_headers": [{"items": ["test"]}],
            "access_control_allow_methods": [{"items": ["GET"]}],
            "access_control_allow_origins": [{"items": ["test.example.comtest"]}],
            "access_control_max_age_sec": 600,
            "origin_override": True,
        }
    ],
    "custom_headers_config": [
        {"items": [{"header": "X-Permitted-Cross-Domain-Policies", "override": True, "value": "none"}]}
    ],
    "remove_headers_config": [{"items": [{"header": "Server"}]}],
    "security_headers_config": [
        {
            "frame_options": [{"frame_option": "DENY", "override": False}],
            "strict_transport_security": [
                {"access_control_max_age_sec": 31536000, "include_subdomains": True, "override": True}
            ],
        }
    ],
    "server_timing_headers_config": [{"enabled": True, "sampling_rate": 10}],
}


def test_expand() -> None:
    d = ResourceData(AwsCloudFrontResponseHeadersPolicy.schema, config=config)
    assert AwsCloudFrontResponseHeadersPolicy.expand(d) == {
        "Comment": "test comment",
        "CorsConfig": {
            "AccessControlAllowCredentials": True,
            "AccessControlAllowHeaders": {"Quantity": 1, "Items": ["test"]},
            "AccessControlAllowMethods": {"Quantity": 1, "Items": ["GET"]},
            "AccessControlAllowOrigins": {"Quantity": 1, "Items": ["test.example.comtest"]},
            "AccessControlMaxAgeSec": 600,
            "OriginOverride": True,
        },
        "CustomHeadersConfig": {
            "Quantity": 1,
            "Items": [{"Header": "X-Permitted-Cross-Domain-Policies", "Override": True, "Value": "none"}],
        },
        "Name": "example-headers-policy",
        "RemoveHeadersConfig": {"Quantity": 1, "Items": [{"Header": "Server"}]},
        "SecurityHeadersConfig": {
            "FrameOptions": {"FrameOption": "DENY", "Override": False},
            "StrictTransportSecurity": {
                "AccessControlMaxAgeSec": 31536000,
                "IncludeSubdomains": True,
                "Override": True,
                "Preload": False,
            },
        },
        "ServerTimingHeadersConfig": {"Enabled": True, "SamplingRate": 10.0},
    }


def test_expand_empty_lists() -> None:
    d = ResourceData(
        AwsCloudFrontResponseHeadersPolicy.schema,
        config={"name": "empty", "custom_headers_config": [{"items": []}], "remove_headers_config": [{}]},
    )
    expanded = AwsCloudFrontResponseHeadersPolicy.expand(d)
    assert expanded["CustomHeadersConfig"] == {"Quantity": 0}
    assert expanded["RemoveHeadersConfig"] == {"Quantity": 0}
    assert "CorsConfig" not in expanded
    assert "SecurityHeadersConfig" not in expanded


def test_validate(provider: CloudFrontProvider) -> None:
    provider.validate(kind, config)
    with pytest.raises(SchemaValidationError) as ex:
        provider.validate(kind, {"name": "no headers"})
    assert ex.value.errors == [
        '"cors_config": one of `cors_config,custom_headers_config,remove_headers_config,'
        'security_headers_config,server_timing_headers_config` must be specified'
    ]
    wrong_method = {"name": "cors", "cors_config": [{**config["cors_config"][0]}]}  # type: ignore
    wrong_method["cors_config"][0]["access_control_allow_methods"] = [{"items": ["GET", "FETCH"]}]
    with pytest.raises(SchemaValidationError) as ex:
        provider.validate(kind, wrong_method)
    assert len(ex.value.errors) == 1
    assert "access_control_allow_methods" in ex.value.errors[0]
    sampling = {"name": "timing", "server_timing_headers_config": [{"enabled": True, "sampling_rate": 100.5}]}
    with pytest.raises(SchemaValidationError):
        provider.validate(kind, sampling)


def test_create_and_read(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    state = provider.create(kind, config)
    assert state is not None
    assert state["id"] == policy_id
    assert state["etag"] == "E1TSD5AN9B5UZ2"
    assert state["cors_config"] == [
        {
            "access_control_allow_credentials": True,
            "access_control_allow_headers": [{"items": ["test"]}],
            "access_control_allow_methods": [{"items": ["GET"]}],
            "access_control_allow_origins": [{"items": ["test.example.comtest"]}],
            "access_control_expose_headers": [],
            "access_control_max_age_sec": 600,
            "origin_override": True,
        }
    ]
    assert state["custom_headers_config"] == config["custom_headers_config"]
    assert state["remove_headers_config"] == config["remove_headers_config"]
    security = state["security_headers_config"][0]
    assert security["frame_options"] == [{"frame_option": "DENY", "override": False}]
    assert security["content_security_policy"] == []
    assert security["strict_transport_security"][0]["preload"] is False
    assert state["server_timing_headers_config"] == [{"enabled": True, "sampling_rate": 10.0}]
    assert provider.read(kind, state) == state
    assert boto_session.actions() == [
        "create-response-headers-policy",
        "get-response-headers-policy",
        "get-response-headers-policy",
    ]


def test_update_and_delete(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    state = provider.import_state(kind, policy_id)
    provider.update(kind, state, {**config, "remove_headers_config": [{"items": []}]})
    args = boto_session.args_of("update-response-headers-policy")
    assert args["Id"] == policy_id
    assert args["IfMatch"] == "E1TSD5AN9B5UZ2"
    assert args["ResponseHeadersPolicyConfig"]["RemoveHeadersConfig"] == {"Quantity": 0}
    provider.delete(kind, state)
    assert boto_session.args_of("delete-response-headers-policy") == {"Id": policy_id, "IfMatch": "E1TSD5AN9B5UZ2"}
