import argparse
import os
from typing import Any, Callable, Union

DEFAULT_ENV_ARGS_PREFIX = "CLOUDFRONT_PROVIDER_"


class Namespace(argparse.Namespace):
    def __getattr__(self, item):
        return None


class ArgumentParser(argparse.ArgumentParser):
    """
    Every --long-option can also be defined via environment variable:
    --aws-region -> CLOUDFRONT_PROVIDER_AWS_REGION
    Options that take multiple values read a space separated list,
    or the numbered variables CLOUDFRONT_PROVIDER_KIND0, CLOUDFRONT_PROVIDER_KIND1, ...
    """

    # The last return value of parse_args(). Returns None for any attribute before parse_args() is called.
    args = Namespace()

    def __init__(self, *args, env_args_prefix: str = DEFAULT_ENV_ARGS_PREFIX, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.env_args_prefix = env_args_prefix

    def env_default(self, action: argparse.Action) -> Any:
        env_name = None
        for option_string in action.option_strings:
            if option_string.startswith("--"):
                env_name = self.env_args_prefix + option_string[2:].replace("-", "_").upper()
                break
        if env_name is None or action.default == argparse.SUPPRESS:
            return None
        if action.nargs in (0, None):
            return os.environ.get(env_name)
        value = os.environ.get(env_name)
        if value is not None:
            return value.split(" ")
        numbered = [os.environ[f"{env_name}{i}"] for i in range(255) if f"{env_name}{i}" in os.environ]
        return numbered or None

    def parse_known_args(self, args=None, namespace=None):
        for action in self._actions:
            new_default = self.env_default(action)
            if new_default is not None:
                type_goal = action.type if callable(action.type) else type(action.default)
                if isinstance(new_default, list):
                    action.default = [convert(n, type_goal) for n in new_default]
                else:
                    action.default = convert(new_default, type_goal)
        ret_args, ret_argv = super().parse_known_args(args=args, namespace=namespace)
        ArgumentParser.args = ret_args
        return ret_args, ret_argv


def get_arg_parser(
    add_help: bool = True,
    description: str = "cloudfront-provider",
    env_args_prefix: str = DEFAULT_ENV_ARGS_PREFIX,
) -> ArgumentParser:
    return ArgumentParser(
        prog="cloudfront-provider", description=description, add_help=add_help, env_args_prefix=env_args_prefix
    )


NoneType = type(None)


def convert(value: Any, type_goal: Union[type, Callable]) -> Any:
    if type_goal is NoneType:
        return value
    elif isinstance(type_goal, type):
        try:
            if type_goal in (str, int, float):
                return type_goal(value)
            elif type_goal is bool:
                return value.lower() in ("true", "1", "yes")
            else:
                # don't know how to handle this type
                return value
        except ValueError:
            # can not convert value
            return value
    elif callable(type_goal):
        return type_goal(value)
