from typing import ClassVar, Dict, List

from cloudfront_provider.json_bender import Bender, EmptyToNone, S, ZeroToNone
from cloudfront_provider.mapping import Block, FromItems, ToItems, Unblock
from cloudfront_provider.resource.base import CloudFrontApiSpec, CloudFrontPolicyResource, policy_api_spec
from cloudfront_provider.schema import Schema, SchemaMap, SchemaType, block, items_block
from cloudfront_provider.validation import float_between, string_in_slice

AccessControlAllowMethods = ["GET", "POST", "OPTIONS", "PUT", "DELETE", "PATCH", "HEAD", "ALL"]
FrameOptions = ["DENY", "SAMEORIGIN"]
ReferrerPolicies = [
    "no-referrer",
    "no-referrer-when-downgrade",
    "origin",
    "origin-when-cross-origin",
    "same-origin",
    "strict-origin",
    "strict-origin-when-cross-origin",
    "unsafe-url",
]
HeaderConfigs = [
    "cors_config",
    "custom_headers_config",
    "remove_headers_config",
    "security_headers_config",
    "server_timing_headers_config",
]


def _bool(required: bool = False) -> Schema:
    return Schema(type=SchemaType.bool, required=required, optional=not required)


def _string(required: bool = False, **kwargs: object) -> Schema:
    return Schema(type=SchemaType.string, required=required, optional=not required, **kwargs)  # type: ignore


cors_config_schema: SchemaMap = {
    "access_control_allow_credentials": _bool(required=True),
    "access_control_allow_headers": items_block(required=True),
    "access_control_allow_methods": items_block(
        required=True, elem=Schema(type=SchemaType.string, validate=string_in_slice(AccessControlAllowMethods))
    ),
    "access_control_allow_origins": items_block(required=True),
    "access_control_expose_headers": items_block(),
    "access_control_max_age_sec": Schema(type=SchemaType.int, optional=True),
    "origin_override": _bool(required=True),
}

security_headers_config_schema: SchemaMap = {
    "content_security_policy": block({"content_security_policy": _string(required=True), "override": _bool(True)}),
    "content_type_options": block({"override": _bool(required=True)}),
    "frame_options": block(
        {"frame_option": _string(required=True, validate=string_in_slice(FrameOptions)), "override": _bool(True)}
    ),
    "referrer_policy": block(
        {"override": _bool(True), "referrer_policy": _string(required=True, validate=string_in_slice(ReferrerPolicies))}
    ),
    "strict_transport_security": block(
        {
            "access_control_max_age_sec": Schema(type=SchemaType.int, required=True),
            "include_subdomains": _bool(),
            "override": _bool(required=True),
            "preload": _bool(),
        }
    ),
    "xss_protection": block(
        {
            "mode_block": _bool(),
            "override": _bool(required=True),
            "protection": _bool(required=True),
            "report_uri": _string(),
        }
    ),
}

cors_config_expand: Dict[str, Bender] = {
    "AccessControlAllowCredentials": S("access_control_allow_credentials"),
    "AccessControlAllowHeaders": S("access_control_allow_headers", 0, "items") >> ToItems(),
    "AccessControlAllowMethods": S("access_control_allow_methods", 0, "items") >> ToItems(),
    "AccessControlAllowOrigins": S("access_control_allow_origins", 0, "items") >> ToItems(),
    "AccessControlExposeHeaders": S("access_control_expose_headers", 0, "items") >> ToItems(),
    "AccessControlMaxAgeSec": S("access_control_max_age_sec") >> ZeroToNone,
    "OriginOverride": S("origin_override"),
}

cors_config_flatten: Dict[str, Bender] = {
    "access_control_allow_credentials": S("AccessControlAllowCredentials"),
    "access_control_allow_headers": S("AccessControlAllowHeaders") >> FromItems(),
    "access_control_allow_methods": S("AccessControlAllowMethods") >> FromItems(),
    "access_control_allow_origins": S("AccessControlAllowOrigins") >> FromItems(),
    "access_control_expose_headers": S("AccessControlExposeHeaders") >> FromItems(),
    "access_control_max_age_sec": S("AccessControlMaxAgeSec"),
    "origin_override": S("OriginOverride"),
}

custom_header_expand: Dict[str, Bender] = {
    "Header": S("header") >> EmptyToNone,
    "Override": S("override"),
    "Value": S("value") >> EmptyToNone,
}
custom_header_flatten: Dict[str, Bender] = {"header": S("Header"), "override": S("Override"), "value": S("Value")}

remove_header_expand: Dict[str, Bender] = {"Header": S("header") >> EmptyToNone}
remove_header_flatten: Dict[str, Bender] = {"header": S("Header")}

security_headers_config_expand: Dict[str, Bender] = {
    "ContentSecurityPolicy": S("content_security_policy")
    >> Unblock({"ContentSecurityPolicy": S("content_security_policy") >> EmptyToNone, "Override": S("override")}),
    "ContentTypeOptions": S("content_type_options") >> Unblock({"Override": S("override")}),
    "FrameOptions": S("frame_options")
    >> Unblock({"FrameOption": S("frame_option") >> EmptyToNone, "Override": S("override")}),
    "ReferrerPolicy": S("referrer_policy")
    >> Unblock({"Override": S("override"), "ReferrerPolicy": S("referrer_policy") >> EmptyToNone}),
    "StrictTransportSecurity": S("strict_transport_security")
    >> Unblock(
        {
            "AccessControlMaxAgeSec": S("access_control_max_age_sec") >> ZeroToNone,
            "IncludeSubdomains": S("include_subdomains"),
            "Override": S("override"),
            "Preload": S("preload"),
        }
    ),
    "XSSProtection": S("xss_protection")
    >> Unblock(
        {
            "ModeBlock": S("mode_block"),
            "Override": S("override"),
            "Protection": S("protection"),
            "ReportUri": S("report_uri") >> EmptyToNone,
        }
    ),
}

security_headers_config_flatten: Dict[str, Bender] = {
    "content_security_policy": S("ContentSecurityPolicy")
    >> Block({"content_security_policy": S("ContentSecurityPolicy"), "override": S("Override")}),
    "content_type_options": S("ContentTypeOptions") >> Block({"override": S("Override")}),
    "frame_options": S("FrameOptions") >> Block({"frame_option": S("FrameOption"), "override": S("Override")}),
    "referrer_policy": S("ReferrerPolicy")
    >> Block({"override": S("Override"), "referrer_policy": S("ReferrerPolicy")}),
    "strict_transport_security": S("StrictTransportSecurity")
    >> Block(
        {
            "access_control_max_age_sec": S("AccessControlMaxAgeSec"),
            "include_subdomains": S("IncludeSubdomains"),
            "override": S("Override"),
            "preload": S("Preload"),
        }
    ),
    "xss_protection": S("XSSProtection")
    >> Block(
        {
            "mode_block": S("ModeBlock"),
            "override": S("Override"),
            "protection": S("Protection"),
            "report_uri": S("ReportUri"),
        }
    ),
}

server_timing_headers_config_expand: Dict[str, Bender] = {
    "Enabled": S("enabled"),
    "SamplingRate": S("sampling_rate"),
}
server_timing_headers_config_flatten: Dict[str, Bender] = {
    "enabled": S("Enabled"),
    "sampling_rate": S("SamplingRate"),
}


class AwsCloudFrontResponseHeadersPolicy(CloudFrontPolicyResource):
    kind: ClassVar[str] = "aws_cloudfront_response_headers_policy"
    kind_display: ClassVar[str] = "AWS CloudFront Response Headers Policy"
    kind_description: ClassVar[str] = (
        "A response headers policy contains the HTTP headers that CloudFront adds to or removes from"
        " HTTP responses that it sends to viewers."
    )
    api_name: ClassVar[str] = "response-headers-policy"
    result_name: ClassVar[str] = "ResponseHeadersPolicy"
    not_found_errors = {"NoSuchResponseHeadersPolicy"}
    schema: ClassVar[SchemaMap] = {
        "comment": _string(),
        "cors_config": Schema(
            type=SchemaType.list, optional=True, max_items=1, elem=cors_config_schema, at_least_one_of=HeaderConfigs
        ),
        "custom_headers_config": Schema(
            type=SchemaType.list,
            optional=True,
            max_items=1,
            elem={
                "items": Schema(
                    type=SchemaType.set,
                    optional=True,
                    elem={"header": _string(True), "override": _bool(True), "value": _string(True)},
                )
            },
            at_least_one_of=HeaderConfigs,
        ),
        "etag": Schema(type=SchemaType.string, optional=True, computed=True),
        "name": _string(required=True),
        "remove_headers_config": Schema(
            type=SchemaType.list,
            optional=True,
            max_items=1,
            elem={"items": Schema(type=SchemaType.set, optional=True, elem={"header": _string(True)})},
            at_least_one_of=HeaderConfigs,
        ),
        "security_headers_config": Schema(
            type=SchemaType.list,
            optional=True,
            max_items=1,
            elem=security_headers_config_schema,
            at_least_one_of=HeaderConfigs,
        ),
        "server_timing_headers_config": Schema(
            type=SchemaType.list,
            optional=True,
            max_items=1,
            elem={
                "enabled": _bool(required=True),
                "sampling_rate": Schema(type=SchemaType.float, required=True, validate=float_between(0.0, 100.0)),
            },
            at_least_one_of=HeaderConfigs,
        ),
    }
    expand_mapping: ClassVar[Dict[str, Bender]] = {
        "Comment": S("comment") >> EmptyToNone,
        "CorsConfig": S("cors_config") >> Unblock(cors_config_expand),
        "CustomHeadersConfig": S("custom_headers_config", 0, "items") >> ToItems(custom_header_expand),
        "Name": S("name"),
        "RemoveHeadersConfig": S("remove_headers_config", 0, "items") >> ToItems(remove_header_expand),
        "SecurityHeadersConfig": S("security_headers_config") >> Unblock(security_headers_config_expand),
        "ServerTimingHeadersConfig": S("server_timing_headers_config") >> Unblock(server_timing_headers_config_expand),
    }
    flatten_mapping: ClassVar[Dict[str, Bender]] = {
        "comment": S("Comment"),
        "cors_config": S("CorsConfig") >> Block(cors_config_flatten, keep_empty=True),
        "custom_headers_config": S("CustomHeadersConfig") >> FromItems(custom_header_flatten, keep_empty=True),
        "name": S("Name"),
        "remove_headers_config": S("RemoveHeadersConfig") >> FromItems(remove_header_flatten, keep_empty=True),
        "security_headers_config": S("SecurityHeadersConfig")
        >> Block(security_headers_config_flatten, keep_empty=True),
        "server_timing_headers_config": S("ServerTimingHeadersConfig")
        >> Block(server_timing_headers_config_flatten, keep_empty=True),
    }
    api_spec: ClassVar[List[CloudFrontApiSpec]] = policy_api_spec("response-headers-policy")
