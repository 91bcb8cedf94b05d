"""
CloudFront provider
~~~~~~~~~~~~~~~~~~~
Manage Amazon CloudFront configuration objects the way Terraform resources do.
:copyright: © 2024 Some Engineering Inc.
:license: Apache 2.0, see LICENSE for more details.
"""

__title__ = "cloudfront_provider"
__description__ = "Terraform style resources for Amazon CloudFront."
__author__ = "Some Engineering Inc."
__license__ = "Apache 2.0"
__copyright__ = "Copyright © 2024 Some Engineering Inc."
__version__ = "1.0.0"


def version() -> str:
    return __version__
