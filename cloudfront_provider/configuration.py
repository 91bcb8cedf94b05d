import logging
import threading
import time
import uuid
from functools import lru_cache
from typing import ClassVar, Optional, Type

import cattrs
from attrs import define, field, fields_dict
from boto3.session import Session as BotoSession
from botocore.client import BaseClient
from botocore.config import Config as BotoConfig

from cloudfront_provider.types import Json

log = logging.getLogger("cloudfront_provider")
_converter = cattrs.Converter()


def global_region_by_partition(partition: str) -> str:
    if partition == "aws":
        return "us-east-1"
    elif partition == "aws-us-gov":
        return "us-gov-west-1"
    elif partition == "aws-cn":
        return "cn-north-1"
    else:
        return "us-east-1"


@define(hash=True, slots=False)
class CloudFrontSessionHolder:
    access_key_id: Optional[str]
    secret_access_key: Optional[str]
    session_token: Optional[str] = None
    profile: Optional[str] = None
    role_arn: Optional[str] = None
    # Only here to override in tests
    session_class_factory: Type[BotoSession] = BotoSession
    kind: ClassVar[str] = "cloudfront_session_holder"
    session_lock: threading.Lock = threading.Lock()

    # noinspection PyUnusedLocal
    @lru_cache(maxsize=16)
    def __direct_session(self, partition: str) -> BotoSession:
        global_region = global_region_by_partition(partition)
        if self.profile:
            return self.session_class_factory(profile_name=self.profile, region_name=global_region)
        else:
            return self.session_class_factory(
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key,
                aws_session_token=self.session_token,
                region_name=global_region,
            )

    # noinspection PyUnusedLocal
    @lru_cache(maxsize=16)
    def __sts_session(self, role_arn: str, partition: str, cache_key: int) -> BotoSession:
        global_region = global_region_by_partition(partition)
        sts = self.__direct_session(partition).client("sts")
        log.info(f"Create AWS session by assuming role: {role_arn}.")
        token = sts.assume_role(
            RoleArn=role_arn,
            RoleSessionName=f"cloudfront-provider-{str(uuid.uuid4())}",
            DurationSeconds=3600,  # 1 hour
        )
        credentials = token["Credentials"]
        return self.session_class_factory(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
            region_name=global_region,
        )

    def _session(self, partition: str = "aws") -> BotoSession:
        """
        Note: the session is not thread safe - caller needs to synchronize access.
        Consider using the client() method instead.
        """
        if self.role_arn is None:
            return self.__direct_session(partition)
        else:
            # Sts session is valid for 1 hour: renew the session after 10 minutes
            return self.__sts_session(self.role_arn, partition, int(time.time() / 600))

    def client(
        self,
        aws_service: str,
        region_name: Optional[str] = None,
        config: Optional[BotoConfig] = None,
        partition: str = "aws",
    ) -> BaseClient:
        with self.session_lock:
            session = self._session(partition)
            return session.client(aws_service, region_name=region_name, config=config)

    def purge_caches(self) -> None:
        self.__direct_session.cache_clear()
        self.__sts_session.cache_clear()


@define(slots=False)
class CloudFrontConfig:
    kind: ClassVar[str] = "cloudfront"
    access_key_id: Optional[str] = field(
        default=None,
        metadata={"description": "AWS Access Key ID (null to load from env - recommended)"},
    )
    secret_access_key: Optional[str] = field(
        default=None,
        metadata={"description": "AWS Secret Access Key (null to load from env - recommended)"},
    )
    session_token: Optional[str] = field(
        default=None,
        metadata={"description": "AWS Session Token of temporary credentials (null to load from env)"},
    )
    profile: Optional[str] = field(default=None, metadata={"description": "AWS profile to use"})
    role_arn: Optional[str] = field(
        default=None,
        metadata={"description": "ARN of the IAM role to assume before calling the CloudFront API"},
    )
    region: str = field(
        default="us-east-1",
        metadata={"description": "Region of the CloudFront control plane"},
    )
    partition: str = field(default="aws", metadata={"description": "AWS partition (aws, aws-cn, aws-us-gov)"})
    max_attempts: int = field(
        default=5,
        metadata={"description": "Number of attempts of a single API call, throttled calls are retried"},
    )
    _lock: threading.RLock = field(factory=threading.RLock, init=False)
    _holder: Optional[CloudFrontSessionHolder] = field(default=None, init=False)

    def sessions(self) -> CloudFrontSessionHolder:
        if self._holder is None:
            with self._lock:
                if self._holder is None:
                    self._holder = CloudFrontSessionHolder(
                        access_key_id=self.access_key_id,
                        secret_access_key=self.secret_access_key,
                        session_token=self.session_token,
                        profile=self.profile,
                        role_arn=self.role_arn,
                    )
        return self._holder

    @staticmethod
    def from_json(json: Json) -> "CloudFrontConfig":
        valid_fields = {name for name in fields_dict(CloudFrontConfig) if not name.startswith("_")}
        return _converter.structure({k: v for k, v in json.items() if k in valid_fields}, CloudFrontConfig)
