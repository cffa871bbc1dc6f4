"""
Pytest configuration and fixtures for demo access infrastructure tests.
"""

import pytest
import os
import boto3
from moto import mock_aws

# Add src to path for imports
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from infrastructure.config.environment_config import EnvironmentConfig


TEST_ACCOUNT_ID = "123456789012"


@pytest.fixture(scope="session")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-central-1"


@pytest.fixture
def dev_config():
    """Development configuration as deployed."""
    return EnvironmentConfig.get_config("dev")


@pytest.fixture
def pinned_config(dev_config):
    """Development configuration with an explicit account id."""
    dev_config.account_id = TEST_ACCOUNT_ID
    return dev_config


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock AWS services for testing."""
    with mock_aws():
        yield


@pytest.fixture
def s3_client(mock_aws_services):
    """S3 client for testing."""
    return boto3.client("s3", region_name="eu-central-1")


@pytest.fixture
def dynamodb_client(mock_aws_services):
    """DynamoDB client for testing."""
    return boto3.client("dynamodb", region_name="eu-central-1")
