"""
Environment-specific configuration for the demo access infrastructure.

This module provides the settings shared by the CloudFormation (AWS CDK) and
Terraform (CDKTF) variants of the stack, one instance per deployment
environment (dev, staging, production).
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass
class EnvironmentConfig:
    """Environment-specific configuration settings."""

    environment_name: str
    aws_region: str

    # VPC settings
    vpc_cidr: str
    max_azs: int
    nat_gateways: int
    subnet_cidr_mask: int
    public_subnet_names: List[str]
    public_subnet_cidrs: List[str]
    enable_dns_hostnames: bool

    # IAM settings
    terraform_user_name: str
    export_prefix: str

    # Terraform provider and remote state settings
    terraform_region: str
    state_bucket: str
    state_key: str
    state_region: str
    state_lock_table: str
    state_encrypt: bool

    account_id: Optional[str] = None
    log_level: str = "INFO"
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def get_config(cls, environment: str) -> "EnvironmentConfig":
        """Get configuration for the specified environment."""
        configs = {
            "dev": cls._dev_config,
            "staging": cls._staging_config,
            "production": cls._production_config
        }

        if environment not in configs:
            raise ValueError(f"Unknown environment: {environment}")

        return configs[environment]()

    @classmethod
    def _dev_config(cls) -> "EnvironmentConfig":
        """Development environment configuration."""
        return cls(
            environment_name="dev",
            aws_region="eu-central-1",

            # VPC - public subnets only, no NAT
            vpc_cidr="10.0.0.0/16",
            max_azs=3,
            nat_gateways=0,
            subnet_cidr_mask=24,
            public_subnet_names=["public-subnet-1", "public-subnet-2", "public-subnet-3"],
            public_subnet_cidrs=["10.0.4.0/24", "10.0.5.0/24", "10.0.6.0/24"],
            enable_dns_hostnames=True,

            terraform_user_name="CDKtf-Python-User-Demo",
            export_prefix="demo",

            terraform_region="eu-central-1",
            state_bucket="edge-global-terraform-state-bucket",
            state_key="tf-backend/tf-cdk/terraform.tfstate",
            state_region="eu-central-1",
            state_lock_table="edge-global-terraform-state-table",
            state_encrypt=True,

            log_level="DEBUG",
            tags={"Project": "demo-access-infra", "Environment": "dev"}
        )

    @classmethod
    def _staging_config(cls) -> "EnvironmentConfig":
        """Staging environment configuration."""
        return cls(
            environment_name="staging",
            aws_region="eu-central-1",

            vpc_cidr="10.1.0.0/16",
            max_azs=3,
            nat_gateways=0,
            subnet_cidr_mask=24,
            public_subnet_names=["public-subnet-1", "public-subnet-2", "public-subnet-3"],
            public_subnet_cidrs=["10.1.4.0/24", "10.1.5.0/24", "10.1.6.0/24"],
            enable_dns_hostnames=True,

            terraform_user_name="CDKtf-Python-User-Staging",
            export_prefix="staging",

            terraform_region="eu-central-1",
            state_bucket="edge-global-terraform-state-bucket",
            state_key="tf-backend/tf-cdk/staging/terraform.tfstate",
            state_region="eu-central-1",
            state_lock_table="edge-global-terraform-state-table",
            state_encrypt=True,

            log_level="INFO",
            tags={"Project": "demo-access-infra", "Environment": "staging"}
        )

    @classmethod
    def _production_config(cls) -> "EnvironmentConfig":
        """Production environment configuration."""
        return cls(
            environment_name="production",
            aws_region="eu-central-1",

            vpc_cidr="10.2.0.0/16",
            max_azs=3,
            nat_gateways=0,
            subnet_cidr_mask=24,
            public_subnet_names=["public-subnet-1", "public-subnet-2", "public-subnet-3"],
            public_subnet_cidrs=["10.2.4.0/24", "10.2.5.0/24", "10.2.6.0/24"],
            enable_dns_hostnames=True,

            terraform_user_name="CDKtf-Python-User-Production",
            export_prefix="production",

            terraform_region="eu-central-1",
            state_bucket="edge-global-terraform-state-bucket",
            state_key="tf-backend/tf-cdk/production/terraform.tfstate",
            state_region="eu-central-1",
            state_lock_table="edge-global-terraform-state-table",
            state_encrypt=True,

            log_level="INFO",
            tags={"Project": "demo-access-infra", "Environment": "production"}
        )

    def backend_config(self) -> Dict[str, Any]:
        """Keyword arguments for the Terraform S3 state backend."""
        return {
            "bucket": self.state_bucket,
            "key": self.state_key,
            "region": self.state_region,
            "dynamodb_table": self.state_lock_table,
            "encrypt": self.state_encrypt,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert scalar configuration to a flat string dictionary."""
        return {
            "environment_name": self.environment_name,
            "aws_region": self.aws_region,
            "vpc_cidr": self.vpc_cidr,
            "max_azs": str(self.max_azs),
            "nat_gateways": str(self.nat_gateways),
            "terraform_user_name": self.terraform_user_name,
            "terraform_region": self.terraform_region,
            "export_prefix": self.export_prefix,
            "state_bucket": self.state_bucket,
            "state_key": self.state_key,
            "state_lock_table": self.state_lock_table,
            "log_level": self.log_level
        }
