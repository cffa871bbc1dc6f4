"""
IAM grant catalog shared by the CloudFormation and Terraform stacks.
"""

from infrastructure.policies.grants import (
    ACCESS_GRANTS,
    POLICY_VERSION,
    PolicyDocument,
    PolicyEffect,
    PolicyGrant,
    build_policy_document,
    get_grant,
)

__all__ = [
    "ACCESS_GRANTS",
    "POLICY_VERSION",
    "PolicyDocument",
    "PolicyEffect",
    "PolicyGrant",
    "build_policy_document",
    "get_grant",
]
