import json
import os
from types import SimpleNamespace
from typing import Any, List, Optional, cast

import pytest

from cloudfront_provider.cloudfront_client import CloudFrontClient
from cloudfront_provider.errors import ResourceOperationError, SchemaValidationError
from cloudfront_provider.naming import has_generated_suffix
from cloudfront_provider.provider import CloudFrontProvider
from cloudfront_provider.resource.public_key import AwsCloudFrontPublicKey
from cloudfront_provider.resource_data import ResourceData
from test import boto_session, cloudfront_client, cloudfront_config, provider  # noqa: F401
from test.resources import BotoFileBasedSession, client_error, file_based_config

kind = AwsCloudFrontPublicKey.kind
key_id = "K2JCJMDEHXQW5F"
encoded_key = "-----BEGIN PUBLIC KEY-----\nMIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEAtest\n-----END PUBLIC KEY-----\n"
caller_reference = "terraform-20240304102133123400000001"
config = {"comment": "test public key", "encoded_key": encoded_key, "name": "example-key"}
state = {
    "id": key_id,
    "caller_reference": caller_reference,
    "comment": "test public key",
    "encoded_key": encoded_key,
    "etag": "E2QWRUHAPOMQZL",
    "name": "example-key",
    "name_prefix": "",
}


def test_create(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    assert provider.create(kind, config) == state
    sent = boto_session.args_of("create-public-key")["PublicKeyConfig"]
    assert sent["Name"] == "example-key"
    assert sent["EncodedKey"] == encoded_key
    assert sent["Comment"] == "test public key"
    assert has_generated_suffix(sent["CallerReference"], "terraform-")


def test_create_with_name_prefix(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    provider.create(kind, {"encoded_key": encoded_key, "name_prefix": "keys-"})
    sent = boto_session.args_of("create-public-key")["PublicKeyConfig"]
    assert sent["Name"].startswith("keys-")
    assert has_generated_suffix(sent["Name"], "keys-")
    assert "Comment" not in sent
    provider.create(kind, {"encoded_key": encoded_key})
    assert boto_session.args_of("create-public-key")["PublicKeyConfig"]["Name"].startswith("tf-")


def test_flatten_name_prefix() -> None:
    d = ResourceData(AwsCloudFrontPublicKey.schema, resource_id=key_id)
    generated = "keys-20240304102133123400000001"
    AwsCloudFrontPublicKey.flatten(d, {"Name": generated, "EncodedKey": encoded_key, "CallerReference": "ref"})
    assert d.get("name") == generated
    assert d.get("name_prefix") == "keys-"
    assert d.get("comment") == ""


def test_validate(provider: CloudFrontProvider) -> None:
    with pytest.raises(SchemaValidationError) as ex:
        provider.validate(kind, {"encoded_key": encoded_key, "name": "a", "name_prefix": "b"})
    assert ex.value.errors == ['"name": conflicts with name_prefix', '"name_prefix": conflicts with name']
    with pytest.raises(SchemaValidationError):
        provider.validate(kind, {"encoded_key": encoded_key, "name": "no spaces allowed"})
    with pytest.raises(SchemaValidationError):
        provider.validate(kind, {"encoded_key": encoded_key, "name_prefix": "x" * 103})
    provider.validate(kind, {"encoded_key": encoded_key, "name_prefix": "x" * 102})


def test_update() -> None:
    with open(os.path.dirname(__file__) + "/files/cloudfront/get-public-key__K2JCJMDEHXQW5F.json") as f:
        get_response = json.load(f)
    actions: List[str] = []

    def call(action: str, result_name: Optional[str] = None, **kwargs: Any) -> Any:
        actions.append(action)
        if action == "update-public-key":
            assert kwargs["Id"] == key_id
            assert kwargs["IfMatch"] == "E2QWRUHAPOMQZL"
            assert kwargs["PublicKeyConfig"] == {
                "CallerReference": caller_reference,
                "Comment": "changed",
                "EncodedKey": encoded_key,
                "Name": "example-key",
            }
            return {"ETag": "E3NEW"}
        return get_response

    client = cast(CloudFrontClient, SimpleNamespace(call=call))
    d = ResourceData(AwsCloudFrontPublicKey.schema, config={**config, "comment": "changed"}, state=state)
    AwsCloudFrontPublicKey.update(client, d)
    assert actions == ["update-public-key", "get-public-key"]


def test_replace(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    changed = {**config, "encoded_key": "other"}
    assert provider.requires_replacement(kind, state, changed) == ["encoded_key"]
    assert provider.requires_replacement(kind, state, {"encoded_key": encoded_key}) == []
    assert provider.requires_replacement(kind, state, {**config, "name": "renamed"}) == ["name"]
    provider.update(kind, state, changed)
    assert boto_session.actions() == ["delete-public-key", "create-public-key", "get-public-key"]
    assert boto_session.args_of("create-public-key")["PublicKeyConfig"]["EncodedKey"] == "other"


def test_replace_incomplete() -> None:
    session = BotoFileBasedSession(errors={"get-public-key": client_error("AccessDenied", "denied")})
    provider = CloudFrontProvider(file_based_config(session))
    with pytest.raises(ResourceOperationError) as ex:
        provider.update(kind, state, {**config, "encoded_key": "other"})
    assert session.actions() == ["delete-public-key", "create-public-key", "get-public-key"]
    # the replacement was created: the state points to it
    assert ex.value.state is not None
    assert ex.value.state["id"] == key_id
    assert ex.value.state["encoded_key"] == "other"


def test_delete(provider: CloudFrontProvider, boto_session: BotoFileBasedSession) -> None:
    provider.delete(kind, state)
    assert boto_session.args_of("delete-public-key") == {"Id": key_id, "IfMatch": "E2QWRUHAPOMQZL"}


def test_import(provider: CloudFrontProvider) -> None:
    assert provider.import_state(kind, key_id) == state
