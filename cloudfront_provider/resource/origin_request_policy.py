from typing import ClassVar, Dict, List

from cloudfront_provider.json_bender import Bender, EmptyToNone, S
from cloudfront_provider.mapping import Block, Unblock
from cloudfront_provider.resource.base import (
    CloudFrontApiSpec,
    CloudFrontPolicyResource,
    behavior_config_expand,
    behavior_config_flatten,
    behavior_config_schema,
    policy_api_spec,
)
from cloudfront_provider.schema import Schema, SchemaMap, SchemaType

CookieBehaviors = ["none", "whitelist", "all", "allExcept"]
HeaderBehaviors = ["none", "whitelist", "allViewer", "allViewerAndWhitelistCloudFront", "allExcept"]
QueryStringBehaviors = ["none", "whitelist", "all", "allExcept"]

cookies_config_expand = behavior_config_expand("cookie", "cookies", "Cookie", "Cookies")
cookies_config_flatten = behavior_config_flatten("cookie", "cookies", "Cookie", "Cookies")
headers_config_expand = behavior_config_expand("header", "headers", "Header", "Headers")
headers_config_flatten = behavior_config_flatten("header", "headers", "Header", "Headers")
query_strings_config_expand = behavior_config_expand("query_string", "query_strings", "QueryString", "QueryStrings")
query_strings_config_flatten = behavior_config_flatten("query_string", "query_strings", "QueryString", "QueryStrings")


class AwsCloudFrontOriginRequestPolicy(CloudFrontPolicyResource):
    kind: ClassVar[str] = "aws_cloudfront_origin_request_policy"
    kind_display: ClassVar[str] = "AWS CloudFront Origin Request Policy"
    kind_description: ClassVar[str] = (
        "An origin request policy defines the values (URL query strings, HTTP headers and cookies)"
        " that CloudFront includes in requests that it sends to the origin."
    )
    api_name: ClassVar[str] = "origin-request-policy"
    result_name: ClassVar[str] = "OriginRequestPolicy"
    not_found_errors = {"NoSuchOriginRequestPolicy"}
    schema: ClassVar[SchemaMap] = {
        "comment": Schema(type=SchemaType.string, optional=True),
        "cookies_config": behavior_config_schema("cookie", "cookies", CookieBehaviors, True),
        "etag": Schema(type=SchemaType.string, computed=True),
        "headers_config": behavior_config_schema("header", "headers", HeaderBehaviors, False),
        "name": Schema(type=SchemaType.string, required=True),
        "query_strings_config": behavior_config_schema("query_string", "query_strings", QueryStringBehaviors, True),
    }
    expand_mapping: ClassVar[Dict[str, Bender]] = {
        "Comment": S("comment") >> EmptyToNone,
        "CookiesConfig": S("cookies_config") >> Unblock(cookies_config_expand),
        "HeadersConfig": S("headers_config") >> Unblock(headers_config_expand),
        "Name": S("name"),
        "QueryStringsConfig": S("query_strings_config") >> Unblock(query_strings_config_expand),
    }
    flatten_mapping: ClassVar[Dict[str, Bender]] = {
        "comment": S("Comment"),
        "cookies_config": S("CookiesConfig") >> Block(cookies_config_flatten, keep_empty=True),
        "headers_config": S("HeadersConfig") >> Block(headers_config_flatten, keep_empty=True),
        "name": S("Name"),
        "query_strings_config": S("QueryStringsConfig") >> Block(query_strings_config_flatten, keep_empty=True),
    }
    api_spec: ClassVar[List[CloudFrontApiSpec]] = policy_api_spec("origin-request-policy")
