import json
import os
import re
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from boto3 import Session
from botocore.exceptions import ClientError

from cloudfront_provider.configuration import CloudFrontConfig


class BotoDummyStsClient:
    def __getattr__(self, action_name: str) -> Callable[[], Any]:
        def call(*args: Any, **kwargs: Any) -> Any:
            return {"Credentials": {"AccessKeyId": "xxx", "SecretAccessKey": "xxx", "SessionToken": "xxx"}}

        return call


class BotoFileClient:
    """
    Answers every action with the json file that matches the action and its string arguments.
    Missing files answer with an empty result.
    """

    def __init__(self, session: "BotoFileBasedSession", service: str) -> None:
        self.session = session
        self.service = service

    @staticmethod
    def path_from(service_name: str, action_name: str, **kwargs: Any) -> str:
        def arg_string(v: Any) -> str:
            return re.sub(r"[^a-zA-Z0-9]", "_", v)

        # only plain string arguments (ids, names, etags) are part of the file name
        strings = [arg_string(v) for _, v in sorted(kwargs.items()) if isinstance(v, str)]
        vals = "__" + "_".join(strings) if strings else ""
        action = action_name.replace("_", "-")
        service = service_name.replace("-", "_")
        path = os.path.dirname(__file__) + f"/files/{service}/{action}{vals}.json"
        return os.path.abspath(path)

    def close(self) -> None:
        pass

    def __getattr__(self, action_name: str) -> Callable[..., Any]:
        def call_action(*args: Any, **kwargs: Any) -> Any:
            assert not args, "No arguments allowed!"
            action = action_name.replace("_", "-")
            self.session.calls.append((action, kwargs))
            if action in self.session.errors:
                error = self.session.errors[action]
                if not isinstance(error, list):
                    raise error
                elif error:
                    # a list of errors is raised one per call, until it is used up
                    raise error.pop(0)
            path = self.path_from(self.service, action_name, **kwargs)
            if os.path.exists(path):
                with open(path) as f:
                    return json.load(f)
            else:
                return {}

        return call_action


# use this factory in tests, to rely on API responses from file system
class BotoFileBasedSession(Session):  # type: ignore
    def __init__(self, errors: Optional[Dict[str, Union[Exception, List[Exception]]]] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        # action -> error that is raised when the action is called
        self.errors: Dict[str, Union[Exception, List[Exception]]] = errors or {}
        # all calls in order: (action, arguments)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def client(self, service_name: str, **kwargs: Any) -> Any:
        return BotoDummyStsClient() if service_name == "sts" else BotoFileClient(self, service_name)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self

    def actions(self) -> List[str]:
        return [action for action, _ in self.calls]

    def args_of(self, action: str) -> Dict[str, Any]:
        matching = [args for name, args in self.calls if name == action]
        assert matching, f"{action} was not called. Calls: {self.actions()}"
        return matching[-1]


def client_error(code: str, message: str = "Err!", operation: str = "foo") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def file_based_config(session: BotoFileBasedSession) -> CloudFrontConfig:
    config = CloudFrontConfig(access_key_id="foo", secret_access_key="bar", max_attempts=1)
    config.sessions().session_class_factory = session
    return config
