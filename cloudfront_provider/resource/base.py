from __future__ import annotations

import logging
from abc import ABC
from typing import Any, Callable, ClassVar, Dict, List, Optional, Set

from attrs import define
from botocore.exceptions import ClientError

from cloudfront_provider.cloudfront_client import CloudFrontClient, error_message, is_not_found, value_in_path
from cloudfront_provider.errors import EmptyResultError, NotFoundError, ResourceOperationError
from cloudfront_provider.json_bender import Bender, EmptyToNone, S, bend
from cloudfront_provider.mapping import FromItems, ToItems
from cloudfront_provider.resource_data import ResourceData
from cloudfront_provider.schema import Schema, SchemaMap, SchemaType, block, items_block
from cloudfront_provider.types import Json
from cloudfront_provider.validation import string_in_slice

log = logging.getLogger("cloudfront_provider")


@define
class CloudFrontApiSpec:
    """
    Specifications for the CloudFront API to call.
    """

    api_action: str
    override_iam_permission: Optional[str] = None  # only set if the permission can not be derived
    service: str = "cloudfront"

    def iam_permission(self) -> str:
        if self.override_iam_permission:
            return self.override_iam_permission
        else:
            action = "".join(word.title() for word in self.api_action.split("-"))
            return f"{self.service}:{action}"


class CloudFrontResource(ABC):
    """
    Base class for all CloudFront resources.
    Override kind, schema, mappings and the lifecycle operations for every resource.
    """

    # The kind of this resource. Needs to be globally unique.
    kind: ClassVar[str] = "aws_cloudfront_resource"
    # The display name of the kind.
    kind_display: ClassVar[str] = "AWS CloudFront Resource"
    # A short description of the kind.
    kind_description: ClassVar[str] = ""
    # The attributes of this resource.
    schema: ClassVar[SchemaMap] = {}
    # Error codes of the API that signal that the resource does not exist.
    not_found_errors: ClassVar[Set[str]] = set()
    # All API calls that are done by the lifecycle operations.
    api_spec: ClassVar[List[CloudFrontApiSpec]] = []
    # Resource data -> API object
    expand_mapping: ClassVar[Dict[str, Bender]] = {}
    # API object -> resource data
    flatten_mapping: ClassVar[Dict[str, Bender]] = {}

    @classmethod
    def expand(cls, d: ResourceData) -> Json:
        return bend(cls.expand_mapping, d.to_json(), strip_nulls=True)  # type: ignore

    @classmethod
    def flatten(cls, d: ResourceData, api_object: Json) -> None:
        for name, value in bend(cls.flatten_mapping, api_object).items():
            d.set(name, value)

    @classmethod
    def create(cls, client: CloudFrontClient, d: ResourceData) -> None:
        raise NotImplementedError(f"{cls.kind} does not support create")

    @classmethod
    def read(cls, client: CloudFrontClient, d: ResourceData) -> None:
        raise NotImplementedError(f"{cls.kind} does not support read")

    @classmethod
    def update(cls, client: CloudFrontClient, d: ResourceData) -> None:
        raise NotImplementedError(f"{cls.kind} does not support update")

    @classmethod
    def delete(cls, client: CloudFrontClient, d: ResourceData) -> None:
        raise NotImplementedError(f"{cls.kind} does not support delete")

    @classmethod
    def import_state(cls, client: CloudFrontClient, d: ResourceData) -> ResourceData:
        # the id is all that is needed to read the resource
        return d

    @classmethod
    def operation_error(cls, verb: str, identifier: Optional[str], cause: Exception) -> ResourceOperationError:
        return ResourceOperationError(f"{verb} {cls.kind_display} ({identifier}): {error_message(cause)}")

    @classmethod
    def find(cls, client: CloudFrontClient, action: str, result_name: Optional[str] = None, **kwargs: Any) -> Json:
        """
        Call the API to fetch a single object.
        Raises NotFoundError if the object does not exist or the answer does not contain it.
        """
        try:
            output = client.call(action, **kwargs)
        except ClientError as e:
            if is_not_found(e, cls.not_found_errors):
                raise NotFoundError(f"{cls.kind_display} not found: {error_message(e)}") from e
            raise
        if not isinstance(output, dict) or (result_name and value_in_path(output, result_name) is None):
            raise EmptyResultError(f"{cls.kind_display}: {action} returned an empty result")
        return output

    @classmethod
    def read_remote(cls, d: ResourceData, finder: Callable[[], Json]) -> Optional[Json]:
        """
        Fetch the remote object for a read operation.
        A resource that was removed outside of this provider is dropped from the state.
        """
        try:
            return finder()
        except NotFoundError as e:
            if not d.is_new_resource():
                log.warning(f"{cls.kind_display} ({d.id}) not found, removing from state")
                d.set_id("")
                return None
            raise cls.operation_error("reading", d.id, e) from e
        except ClientError as e:
            raise cls.operation_error("reading", d.id, e) from e

    @classmethod
    def delete_remote(cls, client: CloudFrontClient, d: ResourceData, action: str, **kwargs: Any) -> None:
        log.info(f"Deleting {cls.kind_display}: {d.id}")
        try:
            client.call(action, **kwargs)
        except ClientError as e:
            if is_not_found(e, cls.not_found_errors):
                log.debug(f"{cls.kind_display} ({d.id}) is already gone")
                return
            raise cls.operation_error("deleting", d.id, e) from e


class CloudFrontPolicyResource(CloudFrontResource, ABC):
    """
    Policies share the same lifecycle:
    the whole policy config is sent on create and update, reads return the config and an ETag.
    """

    # e.g. cache-policy
    api_name: ClassVar[str]
    # e.g. CachePolicy
    result_name: ClassVar[str]

    @classmethod
    def config_name(cls) -> str:
        return f"{cls.result_name}Config"

    @classmethod
    def create(cls, client: CloudFrontClient, d: ResourceData) -> None:
        name = d.get("name")
        log.info(f"Creating {cls.kind_display}: {name}")
        try:
            output = client.call(f"create-{cls.api_name}", **{cls.config_name(): cls.expand(d)})
        except ClientError as e:
            raise cls.operation_error("creating", name, e) from e
        d.set_id(value_in_path(output, f"{cls.result_name}.Id"))
        cls.read(client, d)

    @classmethod
    def read(cls, client: CloudFrontClient, d: ResourceData) -> None:
        path = f"{cls.result_name}.{cls.config_name()}"
        output = cls.read_remote(d, lambda: cls.find(client, f"get-{cls.api_name}", path, Id=d.id))
        if output is None:
            return
        cls.flatten(d, value_in_path(output, path))
        d.set("etag", output.get("ETag"))

    @classmethod
    def update(cls, client: CloudFrontClient, d: ResourceData) -> None:
        log.info(f"Updating {cls.kind_display}: {d.id}")
        try:
            client.call(
                f"update-{cls.api_name}",
                Id=d.id,
                IfMatch=d.get("etag"),
                **{cls.config_name(): cls.expand(d)},
            )
        except ClientError as e:
            raise cls.operation_error("updating", d.id, e) from e
        cls.read(client, d)

    @classmethod
    def delete(cls, client: CloudFrontClient, d: ResourceData) -> None:
        cls.delete_remote(client, d, f"delete-{cls.api_name}", Id=d.id, IfMatch=d.get("etag"))


def behavior_config_schema(behavior: str, names: str, behaviors: List[str], behavior_required: bool) -> Schema:
    """
    Cookie, header and query string configs of policies: a behavior and the names it applies to.
    """
    return block(
        {
            f"{behavior}_behavior": Schema(
                type=SchemaType.string,
                required=behavior_required,
                optional=not behavior_required,
                validate=string_in_slice(behaviors),
            ),
            names: items_block(),
        },
        required=True,
    )


def behavior_config_expand(behavior: str, names: str, api_behavior: str, api_names: str) -> Dict[str, Bender]:
    return {
        f"{api_behavior}Behavior": S(f"{behavior}_behavior") >> EmptyToNone,
        api_names: S(names, 0, "items") >> ToItems(),
    }


def behavior_config_flatten(behavior: str, names: str, api_behavior: str, api_names: str) -> Dict[str, Bender]:
    return {
        f"{behavior}_behavior": S(f"{api_behavior}Behavior") >> EmptyToNone,
        names: S(api_names) >> FromItems(),
    }


def policy_api_spec(api_name: str) -> List[CloudFrontApiSpec]:
    return [CloudFrontApiSpec(f"{verb}-{api_name}") for verb in ("create", "get", "update", "delete")]
