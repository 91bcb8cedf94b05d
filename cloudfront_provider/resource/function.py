import logging
from typing import ClassVar, Dict, List, Optional

from botocore.exceptions import ClientError

from cloudfront_provider.cloudfront_client import CloudFrontClient, value_in_path
from cloudfront_provider.errors import NotFoundError
from cloudfront_provider.json_bender import Bender, S
from cloudfront_provider.resource.base import CloudFrontApiSpec, CloudFrontResource
from cloudfront_provider.resource_data import ResourceData
from cloudfront_provider.schema import Schema, SchemaMap, SchemaType
from cloudfront_provider.types import Json
from cloudfront_provider.validation import string_in_slice

log = logging.getLogger("cloudfront_provider")

FunctionRuntimes = ["cloudfront-js-1.0", "cloudfront-js-2.0"]
StageDevelopment = "DEVELOPMENT"
StageLive = "LIVE"


class AwsCloudFrontFunction(CloudFrontResource):
    kind: ClassVar[str] = "aws_cloudfront_function"
    kind_display: ClassVar[str] = "AWS CloudFront Function"
    kind_description: ClassVar[str] = (
        "A CloudFront function is a lightweight JavaScript function that runs at CloudFront edge locations"
        " to manipulate viewer requests and responses."
    )
    not_found_errors = {"NoSuchFunctionExists"}
    schema: ClassVar[SchemaMap] = {
        "arn": Schema(type=SchemaType.string, computed=True),
        "code": Schema(type=SchemaType.string, required=True),
        "comment": Schema(type=SchemaType.string, optional=True),
        "etag": Schema(type=SchemaType.string, computed=True),
        "live_stage_etag": Schema(type=SchemaType.string, computed=True),
        "name": Schema(type=SchemaType.string, required=True, force_new=True),
        "publish": Schema(type=SchemaType.bool, optional=True, default=True),
        "runtime": Schema(type=SchemaType.string, required=True, validate=string_in_slice(FunctionRuntimes)),
        "status": Schema(type=SchemaType.string, computed=True),
    }
    # describe-function result -> resource data
    flatten_mapping: ClassVar[Dict[str, Bender]] = {
        "arn": S("FunctionSummary", "FunctionMetadata", "FunctionARN"),
        "comment": S("FunctionSummary", "FunctionConfig", "Comment"),
        "etag": S("ETag"),
        "name": S("FunctionSummary", "Name"),
        "runtime": S("FunctionSummary", "FunctionConfig", "Runtime"),
        "status": S("FunctionSummary", "Status"),
    }
    api_spec: ClassVar[List[CloudFrontApiSpec]] = [
        CloudFrontApiSpec("create-function"),
        CloudFrontApiSpec("describe-function"),
        CloudFrontApiSpec("get-function"),
        CloudFrontApiSpec("update-function"),
        CloudFrontApiSpec("publish-function"),
        CloudFrontApiSpec("delete-function"),
    ]

    @classmethod
    def function_config(cls, d: ResourceData) -> Json:
        return {"Comment": d.get("comment"), "Runtime": d.get("runtime")}

    @classmethod
    def find_by_stage(cls, client: CloudFrontClient, name: str, stage: str) -> Json:
        return cls.find(client, "describe-function", "FunctionSummary", Name=name, Stage=stage)

    @classmethod
    def publish(cls, client: CloudFrontClient, d: ResourceData, etag: Optional[str]) -> None:
        log.debug(f"Publishing {cls.kind_display}: {d.id}")
        try:
            client.call("publish-function", Name=d.id, IfMatch=etag)
        except ClientError as e:
            raise cls.operation_error("publishing", d.id, e) from e

    @classmethod
    def create(cls, client: CloudFrontClient, d: ResourceData) -> None:
        name = d.get("name")
        log.info(f"Creating {cls.kind_display}: {name}")
        try:
            output = client.call(
                "create-function",
                Name=name,
                FunctionCode=d.get("code").encode("utf-8"),
                FunctionConfig=cls.function_config(d),
            )
        except ClientError as e:
            raise cls.operation_error("creating", name, e) from e
        d.set_id(value_in_path(output, "FunctionSummary.Name"))
        if d.get("publish"):
            cls.publish(client, d, output.get("ETag"))  # type: ignore
        cls.read(client, d)

    @classmethod
    def read(cls, client: CloudFrontClient, d: ResourceData) -> None:
        development = cls.read_remote(d, lambda: cls.find_by_stage(client, d.id, StageDevelopment))
        if development is None:
            return
        cls.flatten(d, development)

        try:
            code = client.call("get-function", "FunctionCode", Name=d.id, Stage=StageDevelopment)
        except ClientError as e:
            raise cls.operation_error("reading code of", d.id, e) from e
        d.set("code", code)

        try:
            live = cls.find_by_stage(client, d.id, StageLive)
            d.set("live_stage_etag", live.get("ETag"))
        except NotFoundError:
            d.set("live_stage_etag", "")
        except ClientError as e:
            raise cls.operation_error("reading LIVE stage of", d.id, e) from e

    @classmethod
    def update(cls, client: CloudFrontClient, d: ResourceData) -> None:
        etag = d.get("etag")
        if d.has_changes("code", "comment", "runtime"):
            log.info(f"Updating {cls.kind_display}: {d.id}")
            try:
                output = client.call(
                    "update-function",
                    Name=d.id,
                    IfMatch=etag,
                    FunctionCode=d.get("code").encode("utf-8"),
                    FunctionConfig=cls.function_config(d),
                )
            except ClientError as e:
                raise cls.operation_error("updating", d.id, e) from e
            etag = output.get("ETag")  # type: ignore
        if d.get("publish"):
            cls.publish(client, d, etag)
        cls.read(client, d)

    @classmethod
    def delete(cls, client: CloudFrontClient, d: ResourceData) -> None:
        cls.delete_remote(client, d, "delete-function", Name=d.id, IfMatch=d.get("etag"))
