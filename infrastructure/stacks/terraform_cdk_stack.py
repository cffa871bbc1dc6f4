"""
Terraform variant of the demo access stack.

This stack mirrors the CloudFormation variant on CDK for Terraform: the same
IAM user, VPC and least-privilege grants, with every grant rendered as a
standalone IAM policy and attachment. Remote state lives in an S3 backend
locked by a DynamoDB table.
"""

from typing import Optional

from cdktf import (
    S3Backend,
    TerraformHclModule,
    TerraformOutput,
    TerraformStack,
)
from cdktf_cdktf_provider_aws.data_aws_availability_zones import DataAwsAvailabilityZones
from cdktf_cdktf_provider_aws.data_aws_caller_identity import DataAwsCallerIdentity
from cdktf_cdktf_provider_aws.iam_policy import IamPolicy
from cdktf_cdktf_provider_aws.iam_policy_attachment import IamPolicyAttachment
from cdktf_cdktf_provider_aws.iam_user import IamUser
from cdktf_cdktf_provider_aws.provider import AwsProvider, AwsProviderDefaultTags
from constructs import Construct

from infrastructure.config.environment_config import EnvironmentConfig
from infrastructure.policies.grants import ACCESS_GRANTS, PolicyDocument, PolicyGrant

VPC_MODULE_SOURCE = "terraform-aws-modules/vpc/aws"
VPC_MODULE_VERSION = "~> 5.0"


class TerraformCDKStack(TerraformStack):
    """CDKTF stack for the demo user, its VPC and its IAM grants."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: EnvironmentConfig,
        region: Optional[str] = None
    ) -> None:
        super().__init__(scope, construct_id)

        self.config = config
        self.region = region or config.terraform_region

        AwsProvider(
            self,
            "aws",
            region=self.region,
            default_tags=[AwsProviderDefaultTags(tags=config.tags)] if config.tags else None
        )

        self.user = IamUser(
            self,
            "User",
            name=config.terraform_user_name
        )

        self.account_id = self._resolve_account_id()
        self.vpc = self._create_vpc()

        self.policies = {}
        self.attachments = {}
        for grant in ACCESS_GRANTS:
            self._grant(grant)

        self._create_outputs()

    def _resolve_account_id(self) -> str:
        """Use the configured account, or look up the caller's account."""
        if self.config.account_id:
            return self.config.account_id
        self.caller_identity = DataAwsCallerIdentity(self, "current")
        return self.caller_identity.account_id

    def _create_vpc(self) -> TerraformHclModule:
        """Create the VPC from the community registry module across all AZs."""
        all_availability_zones = DataAwsAvailabilityZones(
            self,
            "all-availability-zones"
        ).names

        return TerraformHclModule(
            self,
            "demo-vpc",
            source=VPC_MODULE_SOURCE,
            version=VPC_MODULE_VERSION,
            variables={
                "name": f"{self.config.export_prefix}-vpc",
                "cidr": self.config.vpc_cidr,
                "azs": all_availability_zones,
                "public_subnets": self.config.public_subnet_cidrs,
                "enable_dns_hostnames": self.config.enable_dns_hostnames,
            }
        )

    def _grant(self, grant: PolicyGrant) -> None:
        """Create a policy for the grant and attach it to the user."""
        policy = IamPolicy(
            self,
            grant.policy_id,
            name=grant.policy_name,
            policy=PolicyDocument.for_grant(grant, self.account_id).to_json(),
            description=grant.description
        )

        self.attachments[grant.key] = IamPolicyAttachment(
            self,
            grant.attachment_id,
            name=grant.attachment_name,
            policy_arn=policy.arn,
            users=[self.user.name]
        )
        self.policies[grant.key] = policy

    def _create_outputs(self) -> None:
        self.user_arn_output = TerraformOutput(self, "iam_username", value=self.user.arn)
        self.vpc_id_output = TerraformOutput(self, "vpc_id", value=self.vpc.get_string("vpc_id"))
        self.vpc_cidr_output = TerraformOutput(self, "vpc_cidr", value=self.vpc.get_string("vpc_cidr_block"))
        self.vpc_azs_output = TerraformOutput(self, "vpc_azs", value=self.vpc.get_list("azs"))
        self.vpc_public_output = TerraformOutput(self, "vpc_public", value=self.vpc.get_list("public_subnets"))


def add_remote_state_backend(stack: TerraformStack, config: EnvironmentConfig) -> S3Backend:
    """Store the stack's state in the configured S3 bucket with DynamoDB locking."""
    return S3Backend(stack, **config.backend_config())
