"""
CloudFormation variant of the demo access stack.

This stack defines the demo IAM user, a public-subnet VPC, and the
least-privilege grants for S3, DynamoDB, Lambda, Step Functions, SQS and SNS.
"""

from aws_cdk import (
    Stack,
    CfnOutput,
    Tags,
    aws_ec2 as ec2,
    aws_iam as iam,
)
from constructs import Construct

from infrastructure.config.environment_config import EnvironmentConfig
from infrastructure.policies.grants import PolicyEffect, PolicyGrant, get_grant


class AwsCdkStack(Stack):
    """CDK stack for the demo user, its VPC and its IAM grants."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: EnvironmentConfig,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.config = config

        self.user = self._create_user()
        self.vpc = self._create_vpc()

        self.grant_s3_permissions()
        self.grant_dynamo_permissions()
        self.grant_lambda_permissions()
        self.grant_step_function_permissions()
        self.grant_sqs_permissions()
        self.grant_sns_permissions()

        for key, value in config.tags.items():
            Tags.of(self).add(key, value)

        self._create_outputs()

    def _create_user(self) -> iam.User:
        """Create the demo IAM user with a stable logical id."""
        user = iam.User(
            self,
            "TestCDKUser",
            user_name=f"{self.stack_name}-user"
        )
        user.node.default_child.override_logical_id("TestCDKUser")
        return user

    def _create_vpc(self) -> ec2.Vpc:
        """Create a VPC with one public subnet group per configured name."""
        return ec2.Vpc(
            self,
            "my-cdk-vpc",
            ip_addresses=ec2.IpAddresses.cidr(self.config.vpc_cidr),
            nat_gateways=self.config.nat_gateways,
            max_azs=self.config.max_azs,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name=name,
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=self.config.subnet_cidr_mask
                )
                for name in self.config.public_subnet_names
            ]
        )

    def _statement_for(self, grant: PolicyGrant) -> iam.PolicyStatement:
        return iam.PolicyStatement(
            effect=iam.Effect.ALLOW if grant.effect == PolicyEffect.ALLOW else iam.Effect.DENY,
            actions=list(grant.actions),
            resources=grant.resources_for(self.account)
        )

    def _add_inline_grant(self, key: str) -> None:
        self.user.add_to_policy(self._statement_for(get_grant(key)))

    def grant_s3_permissions(self) -> None:
        self._add_inline_grant("s3")

    def grant_dynamo_permissions(self) -> None:
        self._add_inline_grant("dynamodb-list")
        self._add_inline_grant("dynamodb")

    def grant_lambda_permissions(self) -> None:
        self._add_inline_grant("lambda")

    def grant_sqs_permissions(self) -> None:
        self._add_inline_grant("sqs")

    def grant_sns_permissions(self) -> None:
        self._add_inline_grant("sns")

    def grant_step_function_permissions(self) -> None:
        """Attach Step Functions access as a standalone managed policy."""
        grant = get_grant("step-functions")
        self.step_function_policy = iam.ManagedPolicy(
            self,
            "stepFnPolicy",
            document=iam.PolicyDocument(statements=[self._statement_for(grant)])
        )
        self.step_function_policy.attach_to_user(self.user)

    def _create_outputs(self) -> None:
        """Create CloudFormation outputs for the user and the VPC."""
        CfnOutput(
            self,
            "userArn",
            value=self.user.user_arn,
            description="The arn of the user",
            export_name=f"{self.config.export_prefix}-user"
        )

        CfnOutput(
            self,
            "vpcID",
            value=self.vpc.vpc_id,
            description="The ID of the vpc",
            export_name=f"{self.config.export_prefix}-vpc"
        )
