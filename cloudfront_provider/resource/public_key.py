import logging
from typing import ClassVar, Dict, List

from botocore.exceptions import ClientError

from cloudfront_provider.cloudfront_client import CloudFrontClient, value_in_path
from cloudfront_provider.json_bender import Bender, EmptyToNone, F, S
from cloudfront_provider.naming import UNIQUE_ID_SUFFIX_LENGTH, generate_name, name_prefix_from_name, unique_id
from cloudfront_provider.resource.base import CloudFrontApiSpec, CloudFrontResource
from cloudfront_provider.resource_data import ResourceData
from cloudfront_provider.schema import Schema, SchemaMap, SchemaType
from cloudfront_provider.types import Json
from cloudfront_provider.validation import all_of, string_len_between, string_matches

log = logging.getLogger("cloudfront_provider")

PublicKeyNamePattern = r"^[0-9A-Za-z_-]+$"
PublicKeyNameMessage = "only alphanumeric characters, underscores and hyphens allowed"
valid_name = all_of(string_matches(PublicKeyNamePattern, PublicKeyNameMessage), string_len_between(1, 128))
valid_name_prefix = all_of(
    string_matches(PublicKeyNamePattern, PublicKeyNameMessage), string_len_between(1, 128 - UNIQUE_ID_SUFFIX_LENGTH)
)


class AwsCloudFrontPublicKey(CloudFrontResource):
    kind: ClassVar[str] = "aws_cloudfront_public_key"
    kind_display: ClassVar[str] = "AWS CloudFront Public Key"
    kind_description: ClassVar[str] = (
        "A public key that CloudFront uses to verify signed URLs and signed cookies,"
        " or for field-level encryption."
    )
    not_found_errors = {"NoSuchPublicKey"}
    schema: ClassVar[SchemaMap] = {
        "caller_reference": Schema(type=SchemaType.string, computed=True),
        "comment": Schema(type=SchemaType.string, optional=True),
        "encoded_key": Schema(type=SchemaType.string, required=True, force_new=True),
        "etag": Schema(type=SchemaType.string, computed=True),
        "name": Schema(
            type=SchemaType.string,
            optional=True,
            computed=True,
            force_new=True,
            conflicts_with=["name_prefix"],
            validate=valid_name,
        ),
        "name_prefix": Schema(
            type=SchemaType.string,
            optional=True,
            computed=True,
            force_new=True,
            conflicts_with=["name"],
            validate=valid_name_prefix,
        ),
    }
    flatten_mapping: ClassVar[Dict[str, Bender]] = {
        "caller_reference": S("CallerReference"),
        "comment": S("Comment"),
        "encoded_key": S("EncodedKey"),
        "name": S("Name"),
        "name_prefix": S("Name") >> F(name_prefix_from_name),
    }
    api_spec: ClassVar[List[CloudFrontApiSpec]] = [
        CloudFrontApiSpec("create-public-key"),
        CloudFrontApiSpec("get-public-key"),
        CloudFrontApiSpec("update-public-key"),
        CloudFrontApiSpec("delete-public-key"),
    ]

    @classmethod
    def public_key_config(cls, d: ResourceData, name: str) -> Json:
        caller_reference, ok = d.get_ok("caller_reference")
        config: Json = {
            "CallerReference": caller_reference if ok else unique_id(),
            "EncodedKey": d.get("encoded_key"),
            "Name": name,
        }
        if comment := EmptyToNone(d.get("comment")):
            config["Comment"] = comment
        return config

    @classmethod
    def create(cls, client: CloudFrontClient, d: ResourceData) -> None:
        name = generate_name(d.get("name"), d.get("name_prefix"))
        log.info(f"Creating {cls.kind_display}: {name}")
        try:
            output = client.call("create-public-key", PublicKeyConfig=cls.public_key_config(d, name))
        except ClientError as e:
            raise cls.operation_error("creating", name, e) from e
        d.set_id(value_in_path(output, "PublicKey.Id"))
        cls.read(client, d)

    @classmethod
    def read(cls, client: CloudFrontClient, d: ResourceData) -> None:
        path = "PublicKey.PublicKeyConfig"
        output = cls.read_remote(d, lambda: cls.find(client, "get-public-key", path, Id=d.id))
        if output is None:
            return
        cls.flatten(d, value_in_path(output, path))
        d.set("etag", output.get("ETag"))

    @classmethod
    def update(cls, client: CloudFrontClient, d: ResourceData) -> None:
        log.info(f"Updating {cls.kind_display}: {d.id}")
        try:
            client.call(
                "update-public-key",
                Id=d.id,
                IfMatch=d.get("etag"),
                PublicKeyConfig=cls.public_key_config(d, d.get("name")),
            )
        except ClientError as e:
            raise cls.operation_error("updating", d.id, e) from e
        cls.read(client, d)

    @classmethod
    def delete(cls, client: CloudFrontClient, d: ResourceData) -> None:
        cls.delete_remote(client, d, "delete-public-key", Id=d.id, IfMatch=d.get("etag"))
