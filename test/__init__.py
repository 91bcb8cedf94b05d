from pytest import fixture

from cloudfront_provider.cloudfront_client import CloudFrontClient
from cloudfront_provider.configuration import CloudFrontConfig
from cloudfront_provider.provider import CloudFrontProvider
from test.resources import BotoFileBasedSession, file_based_config


@fixture
def boto_session() -> BotoFileBasedSession:
    return BotoFileBasedSession()


@fixture
def cloudfront_config(boto_session: BotoFileBasedSession) -> CloudFrontConfig:
    return file_based_config(boto_session)


@fixture
def cloudfront_client(cloudfront_config: CloudFrontConfig) -> CloudFrontClient:
    return CloudFrontClient(cloudfront_config)


@fixture
def provider(cloudfront_config: CloudFrontConfig, cloudfront_client: CloudFrontClient) -> CloudFrontProvider:
    return CloudFrontProvider(cloudfront_config, cloudfront_client)
