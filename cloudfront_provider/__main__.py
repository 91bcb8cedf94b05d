import json
import sys
from argparse import Namespace
from typing import Any, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from cloudfront_provider import logger, version
from cloudfront_provider.args import ArgumentParser, get_arg_parser
from cloudfront_provider.configuration import CloudFrontConfig
from cloudfront_provider.errors import ProviderError, ResourceOperationError, SchemaValidationError
from cloudfront_provider.logger import log, setup_logger
from cloudfront_provider.provider import CloudFrontProvider, all_resources
from cloudfront_provider.schema import schema_to_json

kinds = sorted(r.kind for r in all_resources)


def common_args() -> ArgumentParser:
    parser = ArgumentParser(add_help=False)
    parser.add_argument("--aws-access-key-id", help="AWS Access Key ID", dest="aws_access_key_id", default=None)
    parser.add_argument(
        "--aws-secret-access-key", help="AWS Secret Access Key", dest="aws_secret_access_key", default=None
    )
    parser.add_argument("--aws-profile", help="AWS profile to use", dest="aws_profile", default=None)
    parser.add_argument("--aws-role-arn", help="AWS IAM role to assume", dest="aws_role_arn", default=None)
    parser.add_argument("--aws-region", help="Region of the CloudFront API", dest="aws_region", default=None)
    parser.add_argument(
        "--provider-config",
        help="Json file with the provider configuration",
        dest="provider_config",
        metavar="FILE",
        default=None,
    )
    logger.add_args(parser)
    return parser


def add_args(arg_parser: ArgumentParser) -> None:
    arg_parser.add_argument("--version", action="version", version=f"%(prog)s {version()}")
    common = common_args()
    commands = arg_parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    def command(name: str, help_text: str, kind_required: bool = True) -> ArgumentParser:
        parser: ArgumentParser = commands.add_parser(name, help=help_text, parents=[common])
        if kind_required:
            parser.add_argument("--kind", help="Kind of the resource", dest="kind", choices=kinds, default=None)
        return parser

    create = command("create", "Create a resource from a configuration and print its state")
    create.add_argument("--config", help="Json file with the resource configuration", dest="config", metavar="FILE")
    read = command("read", "Read the current state of a resource")
    read.add_argument("--state", help="Json file with the resource state", dest="state", metavar="FILE")
    update = command("update", "Update a resource to match its configuration")
    update.add_argument("--config", help="Json file with the resource configuration", dest="config", metavar="FILE")
    update.add_argument("--state", help="Json file with the resource state", dest="state", metavar="FILE")
    delete = command("delete", "Delete a resource")
    delete.add_argument("--state", help="Json file with the resource state", dest="state", metavar="FILE")
    import_cmd = command("import", "Import an existing resource by its id and print its state")
    import_cmd.add_argument("--id", help="Id of the existing resource", dest="id")
    validate = command("validate", "Validate a resource configuration")
    validate.add_argument("--config", help="Json file with the resource configuration", dest="config", metavar="FILE")
    command("schema", "Print the schema of a resource kind")
    policy = command("policy", "Print the IAM policy needed to manage the given kinds", kind_required=False)
    policy.add_argument(
        "--kind", help="Kinds to include (all if not defined)", dest="kind", choices=kinds, nargs="*", default=None
    )


def verify_args(args: Namespace) -> None:
    if args.command != "policy" and not args.kind:
        raise ValueError("--kind is required")
    if args.command in ("create", "update", "validate") and not args.config:
        raise ValueError(f"{args.command} requires --config")
    if args.command in ("read", "update", "delete") and not args.state:
        raise ValueError(f"{args.command} requires --state")
    if args.command == "import" and not args.id:
        raise ValueError("import requires --id")
    if args.aws_profile and (args.aws_access_key_id or args.aws_secret_access_key):
        raise ValueError("--aws-profile can not be combined with --aws-access-key-id or --aws-secret-access-key")


def load_json(file_name: str) -> Any:
    if file_name == "-":
        return json.load(sys.stdin)
    with open(file_name, encoding="utf-8") as f:
        return json.load(f)


def provider_config(args: Namespace) -> CloudFrontConfig:
    config = CloudFrontConfig.from_json(load_json(args.provider_config)) if args.provider_config else CloudFrontConfig()
    overrides = {
        "access_key_id": args.aws_access_key_id,
        "secret_access_key": args.aws_secret_access_key,
        "profile": args.aws_profile,
        "role_arn": args.aws_role_arn,
        "region": args.aws_region,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    return config


def print_json(js: Any) -> None:
    print(json.dumps(js, indent=2, sort_keys=True))


def run(provider: CloudFrontProvider, args: Namespace) -> int:
    command = args.command
    if command == "schema":
        print_json(schema_to_json(provider.schema(args.kind)))
    elif command == "policy":
        print_json(provider.iam_policy(args.kind))
    elif command == "validate":
        provider.validate(args.kind, load_json(args.config))
        log.info(f"Configuration of {args.kind} is valid")
    elif command == "create":
        print_json(provider.create(args.kind, load_json(args.config)))
    elif command == "read":
        state = provider.read(args.kind, load_json(args.state))
        if state is None:
            log.warning(f"{args.kind} does not exist anymore")
        print_json(state)
    elif command == "update":
        print_json(provider.update(args.kind, load_json(args.state), load_json(args.config)))
    elif command == "delete":
        provider.delete(args.kind, load_json(args.state))
    elif command == "import":
        print_json(provider.import_state(args.kind, args.id))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = get_arg_parser(description="Manage Amazon CloudFront resources")
    add_args(parser)
    args = parser.parse_args(argv)
    try:
        verify_args(args)
    except ValueError as e:
        parser.error(str(e))
    setup_logger("cloudfront-provider", verbose=args.verbose, trace=args.trace, quiet=args.quiet)

    try:
        provider = CloudFrontProvider(provider_config(args))
        return run(provider, args)
    except (OSError, json.JSONDecodeError) as e:
        parser.error(f"Can not read input: {e}")
    except SchemaValidationError as e:
        for error in e.errors:
            log.error(f"{e.kind}: {error}")
        return 1
    except (ProviderError, ClientError, BotoCoreError) as e:
        if isinstance(e, ResourceOperationError) and e.state is not None:
            # the state of a created but incomplete resource has to be kept
            print_json(e.state)
        log.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
