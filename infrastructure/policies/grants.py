"""
Least-privilege IAM grants for the demo user.

Both the CloudFormation and the Terraform stacks render their IAM policies
from the catalog in this module, so the two variants always carry the same
statements. Resource ARNs are stored as templates with an ``{account}``
placeholder and resolved per stack.
"""

import json
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field, validator, ConfigDict


logger = Logger(service="demo-access-infra", child=True)

POLICY_VERSION = "2012-10-17"

_ACTION_PATTERN = re.compile(r"^[A-Za-z0-9-]+:[A-Za-z0-9*?]+$")


class PolicyEffect(str, Enum):
    """IAM statement effect."""
    ALLOW = "Allow"
    DENY = "Deny"


class PolicyGrant(BaseModel):
    """A single IAM statement granted to the demo user."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        validate_default=True,
        use_enum_values=True
    )

    key: str = Field(..., min_length=1, description="Catalog key")
    description: str = Field(..., min_length=1, description="Policy description")
    effect: PolicyEffect = Field(default=PolicyEffect.ALLOW, description="Statement effect")
    actions: List[str] = Field(..., min_length=1, description="IAM actions")
    resources: List[str] = Field(..., min_length=1, description="Resource ARN templates")
    managed: bool = Field(default=False, description="Attach as a standalone managed policy in CDK")

    # Terraform naming
    policy_id: str = Field(..., min_length=1, description="IamPolicy construct id")
    policy_name: str = Field(..., min_length=1, description="IamPolicy name")
    attachment_id: str = Field(..., min_length=1, description="IamPolicyAttachment construct id")
    attachment_name: str = Field(..., min_length=1, description="IamPolicyAttachment name")

    @validator('actions')
    def validate_actions(cls, v):
        """Ensure every action looks like service:Action."""
        for action in v:
            if not _ACTION_PATTERN.match(action):
                raise ValueError(f"Invalid IAM action: {action!r}")
        return v

    @validator('resources')
    def validate_resources(cls, v):
        """Ensure every resource is a wildcard or an ARN template."""
        for resource in v:
            if resource != "*" and not resource.startswith("arn:"):
                raise ValueError(f"Invalid resource ARN: {resource!r}")
        return v

    def resources_for(self, account: str) -> List[str]:
        """Resolve the resource templates for an account id or token."""
        return [resource.format(account=account) for resource in self.resources]

    def to_statement(self, account: str) -> Dict[str, Any]:
        """Render the grant as an IAM JSON policy statement."""
        return {
            "Action": list(self.actions),
            "Resource": self.resources_for(account),
            "Effect": self.effect,
        }


class PolicyDocument(BaseModel):
    """IAM JSON policy document."""

    version: str = Field(default=POLICY_VERSION, description="Policy language version")
    statements: List[Dict[str, Any]] = Field(default_factory=list, description="Policy statements")

    @classmethod
    def for_grant(cls, grant: PolicyGrant, account: str) -> "PolicyDocument":
        return cls(statements=[grant.to_statement(account)])

    def to_dict(self) -> Dict[str, Any]:
        return {"Version": self.version, "Statement": self.statements}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


ACCESS_GRANTS: List[PolicyGrant] = [
    PolicyGrant(
        key="s3",
        description="This policy add s3 permissions",
        actions=[
            "s3:ListBucket",
            "s3:GetObject",
            "s3:PutObject",
            "s3:PutObjectTagging",
            "s3:DeleteObject",
        ],
        resources=["arn:aws:s3:::*"],
        policy_id="s3Permission",
        policy_name="s3Permission",
        attachment_id="s3PermissionPolicy",
        attachment_name="s3-Permission-attachment",
    ),
    PolicyGrant(
        key="dynamodb-list",
        description="This policy add DynamoDB list permissions",
        actions=["dynamodb:ListTables"],
        resources=["arn:aws:dynamodb:*:{account}:table/*"],
        policy_id="dynamoListTablePolicy",
        policy_name="DynamoList",
        attachment_id="DynamoList",
        attachment_name="dynamo-ListTable-attachment",
    ),
    PolicyGrant(
        key="dynamodb",
        description="This policy add DynamoDB permissions",
        actions=[
            "dynamodb:Query",
            "dynamodb:Scan",
            "dynamodb:DescribeTable",
            "dynamodb:GetItem",
            "dynamodb:PutItem",
            "dynamodb:UpdateItem",
            "dynamodb:DeleteItem",
        ],
        resources=["arn:aws:dynamodb:*:{account}:table/*"],
        policy_id="dynamoPermission",
        policy_name="DynamoPermissions",
        attachment_id="DynamoPermissions",
        attachment_name="dynamo-Permission-attachment",
    ),
    PolicyGrant(
        key="lambda",
        description="This policy add Lambda permissions",
        actions=["lambda:InvokeFunction", "lambda:GetFunctionConfiguration"],
        resources=["arn:aws:lambda:*:{account}:function:*"],
        policy_id="lambdaPermission",
        policy_name="lambdaPermission",
        attachment_id="lambdaPermissionPolicy",
        attachment_name="lambda-Permission-attachment",
    ),
    PolicyGrant(
        key="step-functions",
        description="This policy add step function permissions",
        actions=[
            "states:StartExecution",
            "states:StopExecution",
            "states:DescribeStateMachine",
            "states:ListExecutions",
            "states:GetExecutionHistory",
            "states:DescribeExecution",
        ],
        resources=[
            "arn:aws:states:*:{account}:stateMachine:*",
            "arn:aws:states:*:{account}:execution:*",
            "arn:aws:states:*:{account}:activity:*",
        ],
        managed=True,
        policy_id="stepFunctionPermission",
        policy_name="stepFunctionPermission",
        attachment_id="stepFunctionPermissionPolicy",
        attachment_name="step-Function-Permission-attachment",
    ),
    PolicyGrant(
        key="sqs",
        description="This policy add sqs permissions",
        actions=[
            "sqs:SendMessage",
            "sqs:GetQueueAttributes",
            "sqs:GetQueueUrl",
            "sqs:ReceiveMessage",
            "sqs:ChangeMessageVisibility",
            "sqs:DeleteMessage",
            "sqs:CreateQueue",
        ],
        resources=["arn:aws:sqs:*:{account}:*"],
        policy_id="sqsPermission",
        policy_name="sqsPermission",
        attachment_id="sqsPermissionPolicy",
        attachment_name="sqs-Permission-attachment",
    ),
    PolicyGrant(
        key="sns",
        description="This policy add sns permissions",
        actions=["SNS:Publish"],
        resources=["arn:aws:sns:*:{account}:*"],
        policy_id="snsPermission",
        policy_name="snsPermission",
        attachment_id="snsPermissionPolicy",
        attachment_name="sns-Permission-attachment",
    ),
]


def get_grant(key: str) -> PolicyGrant:
    """
    Look up a grant by catalog key.

    Raises:
        KeyError: If no grant has the given key.
    """
    for grant in ACCESS_GRANTS:
        if grant.key == key:
            return grant
    raise KeyError(f"Unknown grant: {key}")


def build_policy_document(
    grants: Optional[Iterable[PolicyGrant]] = None,
    account: str = "*"
) -> PolicyDocument:
    """
    Merge grants into a single policy document.

    Args:
        grants: Grants to include (defaults to the whole catalog).
        account: Account id or token substituted into resource ARNs.

    Returns:
        PolicyDocument with one statement per grant, in order.
    """
    selected = list(ACCESS_GRANTS if grants is None else grants)
    logger.debug("Building policy document", extra={"grants": [g.key for g in selected]})
    return PolicyDocument(statements=[grant.to_statement(account) for grant in selected])
