#!/usr/bin/env python3
"""
Demo Access Infrastructure CDKTF Application Entry Point

This is the entry point for the CDK for Terraform variant. State is stored
remotely in S3; create the bucket and lock table first with
``scripts/bootstrap_state.py``.

The environment comes from the ``environment`` context, then the
``ENVIRONMENT`` variable, then defaults to ``dev``.
"""

import os
from typing import Any, Dict, Optional

from cdktf import App
from aws_lambda_powertools import Logger

from infrastructure.stacks.terraform_cdk_stack import TerraformCDKStack, add_remote_state_backend
from infrastructure.config.environment_config import EnvironmentConfig

logger = Logger(service="demo-access-infra")

STACK_ID = "Terraform-CDK"


def resolve_environment(app: App) -> str:
    return app.node.try_get_context("environment") or os.environ.get("ENVIRONMENT", "dev")


def main(outdir: Optional[str] = None, context: Optional[Dict[str, Any]] = None) -> TerraformCDKStack:
    """Main application entry point."""
    app = App(outdir=outdir, context=context)

    env_name = resolve_environment(app)

    config = EnvironmentConfig.get_config(env_name)
    logger.setLevel(config.log_level)

    stack = TerraformCDKStack(app, STACK_ID, config=config)
    add_remote_state_backend(stack, config)

    logger.info(
        "Synthesizing Terraform stack",
        extra={"stack": STACK_ID, "environment": env_name, "state_key": config.state_key}
    )

    app.synth()
    return stack


if __name__ == "__main__":
    main()
