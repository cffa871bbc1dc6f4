"""
Terraform remote state bootstrap.

The S3 backend used by the Terraform stack expects its state bucket and lock
table to exist before the first ``cdktf deploy``. This module creates both
idempotently: a versioned, encrypted, private bucket and a DynamoDB table
keyed by ``LockID``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from infrastructure.config.environment_config import EnvironmentConfig


logger = Logger(service="demo-access-infra", child=True)

LOCK_TABLE_HASH_KEY = "LockID"


class StateBackendError(Exception):
    """Raised when the state bucket or lock table cannot be provisioned."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code


@dataclass
class BackendStatus:
    """Outcome of a bootstrap run."""

    bucket: str
    table: str
    region: str
    bucket_created: bool
    table_created: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bucket": self.bucket,
            "table": self.table,
            "region": self.region,
            "bucket_created": self.bucket_created,
            "table_created": self.table_created,
        }


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _bucket_exists(s3_client, bucket: str) -> bool:
    """Return True if the bucket exists and is reachable with our credentials."""
    try:
        s3_client.head_bucket(Bucket=bucket)
    except ClientError as e:
        if _error_code(e) in ("404", "NoSuchBucket", "NotFound"):
            return False
        logger.error("Cannot access state bucket", extra={"bucket": bucket, "error": str(e)})
        raise StateBackendError(f"Cannot access state bucket {bucket}: {e}", _error_code(e)) from e
    return True


def ensure_state_bucket(s3_client, bucket: str, region: str) -> bool:
    """
    Create the state bucket and lock down its configuration.

    Args:
        s3_client: boto3 S3 client.
        bucket: Bucket name.
        region: Region the bucket lives in.

    Returns:
        True if the bucket was created, False if it already existed.

    Raises:
        StateBackendError: If any S3 call fails for another reason.
    """
    # us-east-1 answers create_bucket with 200 for a bucket you already own,
    # so existence is checked up front.
    created = not _bucket_exists(s3_client, bucket)

    if created:
        create_args: Dict[str, Any] = {"Bucket": bucket}
        if region != "us-east-1":
            create_args["CreateBucketConfiguration"] = {"LocationConstraint": region}

        try:
            s3_client.create_bucket(**create_args)
        except ClientError as e:
            if _error_code(e) != "BucketAlreadyOwnedByYou":
                logger.error("Failed to create state bucket", extra={"bucket": bucket, "error": str(e)})
                raise StateBackendError(f"Cannot create state bucket {bucket}: {e}", _error_code(e)) from e
            created = False

    if not created:
        logger.info("State bucket already exists", extra={"bucket": bucket})

    try:
        s3_client.put_bucket_versioning(
            Bucket=bucket,
            VersioningConfiguration={"Status": "Enabled"}
        )
        s3_client.put_bucket_encryption(
            Bucket=bucket,
            ServerSideEncryptionConfiguration={
                "Rules": [
                    {"ApplyServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"}}
                ]
            }
        )
        s3_client.put_public_access_block(
            Bucket=bucket,
            PublicAccessBlockConfiguration={
                "BlockPublicAcls": True,
                "IgnorePublicAcls": True,
                "BlockPublicPolicy": True,
                "RestrictPublicBuckets": True,
            }
        )
    except ClientError as e:
        logger.error("Failed to configure state bucket", extra={"bucket": bucket, "error": str(e)})
        raise StateBackendError(f"Cannot configure state bucket {bucket}: {e}", _error_code(e)) from e

    return created


def ensure_lock_table(dynamodb_client, table: str) -> bool:
    """
    Create the state lock table and wait for it to become active.

    Returns:
        True if the table was created, False if it already existed.

    Raises:
        StateBackendError: If DynamoDB rejects the request.
    """
    try:
        dynamodb_client.create_table(
            TableName=table,
            KeySchema=[{"AttributeName": LOCK_TABLE_HASH_KEY, "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": LOCK_TABLE_HASH_KEY, "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST"
        )
    except ClientError as e:
        if _error_code(e) == "ResourceInUseException":
            logger.info("Lock table already exists", extra={"table": table})
            dynamodb_client.get_waiter("table_exists").wait(TableName=table)
            return False
        logger.error("Failed to create lock table", extra={"table": table, "error": str(e)})
        raise StateBackendError(f"Cannot create lock table {table}: {e}", _error_code(e)) from e

    dynamodb_client.get_waiter("table_exists").wait(TableName=table)
    return True


def bootstrap_state_backend(
    config: EnvironmentConfig,
    session: Optional[boto3.session.Session] = None
) -> BackendStatus:
    """Provision the remote state bucket and lock table for an environment."""
    session = session or boto3.Session()
    region = config.state_region

    logger.info(
        "Bootstrapping Terraform state backend",
        extra={
            "environment": config.environment_name,
            "bucket": config.state_bucket,
            "table": config.state_lock_table,
            "region": region,
        }
    )

    bucket_created = ensure_state_bucket(
        session.client("s3", region_name=region),
        config.state_bucket,
        region
    )
    table_created = ensure_lock_table(
        session.client("dynamodb", region_name=region),
        config.state_lock_table
    )

    status = BackendStatus(
        bucket=config.state_bucket,
        table=config.state_lock_table,
        region=region,
        bucket_created=bucket_created,
        table_created=table_created
    )
    logger.info("State backend ready", extra=status.to_dict())
    return status
