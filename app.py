#!/usr/bin/env python3
"""
Demo Access Infrastructure CDK Application Entry Point

This is the entry point for the AWS CDK (CloudFormation) variant of the
demo user, VPC and least-privilege IAM grants.
"""

import os
from typing import Any, Dict, Optional

import aws_cdk as cdk
from aws_cdk import Environment, cx_api
from aws_lambda_powertools import Logger

from infrastructure.stacks.aws_cdk_stack import AwsCdkStack
from infrastructure.config.environment_config import EnvironmentConfig

logger = Logger(service="demo-access-infra")


def main(
    outdir: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> cx_api.CloudAssembly:
    """Main application entry point."""
    app = cdk.App(outdir=outdir, context=context)

    # Get environment from context or default to 'dev'
    env_name = app.node.try_get_context("environment") or "dev"

    config = EnvironmentConfig.get_config(env_name)
    logger.setLevel(config.log_level)

    aws_env = Environment(
        account=os.environ.get("CDK_DEFAULT_ACCOUNT", config.account_id),
        region=os.environ.get("CDK_DEFAULT_REGION", config.aws_region)
    )

    stack_id = f"AwsCdkStack-{env_name}"
    logger.info("Synthesizing CloudFormation stack", extra={"stack": stack_id, **config.to_dict()})

    AwsCdkStack(
        app,
        stack_id,
        config=config,
        env=aws_env,
        description=f"Demo user, VPC and IAM grants for {env_name} environment"
    )

    return app.synth()


if __name__ == "__main__":
    main()
