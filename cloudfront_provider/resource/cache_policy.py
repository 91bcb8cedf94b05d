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
from cloudfront_provider.schema import Schema, SchemaMap, SchemaType, block

CookieBehaviors = ["none", "whitelist", "allExcept", "all"]
HeaderBehaviors = ["none", "whitelist"]
QueryStringBehaviors = ["none", "whitelist", "allExcept", "all"]

cache_key_parameters_expand: Dict[str, Bender] = {
    "CookiesConfig": S("cookies_config") >> Unblock(behavior_config_expand("cookie", "cookies", "Cookie", "Cookies")),
    "EnableAcceptEncodingBrotli": S("enable_accept_encoding_brotli"),
    "EnableAcceptEncodingGzip": S("enable_accept_encoding_gzip"),
    "HeadersConfig": S("headers_config") >> Unblock(behavior_config_expand("header", "headers", "Header", "Headers")),
    "QueryStringsConfig": S("query_strings_config")
    >> Unblock(behavior_config_expand("query_string", "query_strings", "QueryString", "QueryStrings")),
}

cache_key_parameters_flatten: Dict[str, Bender] = {
    "cookies_config": S("CookiesConfig") >> Block(behavior_config_flatten("cookie", "cookies", "Cookie", "Cookies")),
    "enable_accept_encoding_brotli": S("EnableAcceptEncodingBrotli"),
    "enable_accept_encoding_gzip": S("EnableAcceptEncodingGzip"),
    "headers_config": S("HeadersConfig") >> Block(behavior_config_flatten("header", "headers", "Header", "Headers")),
    "query_strings_config": S("QueryStringsConfig")
    >> Block(behavior_config_flatten("query_string", "query_strings", "QueryString", "QueryStrings")),
}


class AwsCloudFrontCachePolicy(CloudFrontPolicyResource):
    kind: ClassVar[str] = "aws_cloudfront_cache_policy"
    kind_display: ClassVar[str] = "AWS CloudFront Cache Policy"
    kind_description: ClassVar[str] = (
        "A CloudFront cache policy defines the values (URL query strings, HTTP headers and cookies) that are"
        " part of the cache key, and the time to live of objects in the CloudFront cache."
    )
    api_name: ClassVar[str] = "cache-policy"
    result_name: ClassVar[str] = "CachePolicy"
    not_found_errors = {"NoSuchCachePolicy"}
    schema: ClassVar[SchemaMap] = {
        "comment": Schema(type=SchemaType.string, optional=True),
        "default_ttl": Schema(type=SchemaType.int, optional=True, computed=True, default=86400),
        "etag": Schema(type=SchemaType.string, computed=True),
        "max_ttl": Schema(type=SchemaType.int, optional=True, computed=True, default=31536000),
        "min_ttl": Schema(type=SchemaType.int, optional=True, default=0),
        "name": Schema(type=SchemaType.string, required=True),
        "parameters_in_cache_key_and_forwarded_to_origin": block(
            {
                "cookies_config": behavior_config_schema("cookie", "cookies", CookieBehaviors, True),
                "enable_accept_encoding_brotli": Schema(type=SchemaType.bool, optional=True),
                "enable_accept_encoding_gzip": Schema(type=SchemaType.bool, optional=True),
                "headers_config": behavior_config_schema("header", "headers", HeaderBehaviors, False),
                "query_strings_config": behavior_config_schema(
                    "query_string", "query_strings", QueryStringBehaviors, True
                ),
            },
            required=True,
        ),
    }
    expand_mapping: ClassVar[Dict[str, Bender]] = {
        "Comment": S("comment") >> EmptyToNone,
        "DefaultTTL": S("default_ttl"),
        "MaxTTL": S("max_ttl"),
        "MinTTL": S("min_ttl"),
        "Name": S("name"),
        "ParametersInCacheKeyAndForwardedToOrigin": S("parameters_in_cache_key_and_forwarded_to_origin")
        >> Unblock(cache_key_parameters_expand),
    }
    flatten_mapping: ClassVar[Dict[str, Bender]] = {
        "comment": S("Comment"),
        "default_ttl": S("DefaultTTL"),
        "max_ttl": S("MaxTTL"),
        "min_ttl": S("MinTTL"),
        "name": S("Name"),
        "parameters_in_cache_key_and_forwarded_to_origin": S("ParametersInCacheKeyAndForwardedToOrigin")
        >> Block(cache_key_parameters_flatten, keep_empty=True),
    }
    api_spec: ClassVar[List[CloudFrontApiSpec]] = policy_api_spec("cache-policy")
