"""
Unit tests for the IAM grant catalog.
"""

import json

import pytest
from pydantic import ValidationError

from infrastructure.policies.grants import (
    ACCESS_GRANTS,
    POLICY_VERSION,
    PolicyDocument,
    PolicyEffect,
    PolicyGrant,
    build_policy_document,
    get_grant,
)


def _grant(**overrides):
    values = {
        "key": "test",
        "description": "Test grant",
        "actions": ["s3:GetObject"],
        "resources": ["arn:aws:s3:::bucket/*"],
        "policy_id": "testPermission",
        "policy_name": "testPermission",
        "attachment_id": "testPermissionPolicy",
        "attachment_name": "test-Permission-attachment",
    }
    values.update(overrides)
    return PolicyGrant(**values)


class TestPolicyGrant:
    """Test PolicyGrant validation and rendering."""

    def test_defaults_to_allow(self):
        grant = _grant()
        assert grant.effect == "Allow"
        assert grant.managed is False

    def test_deny_effect(self):
        grant = _grant(effect=PolicyEffect.DENY)
        assert grant.to_statement("123456789012")["Effect"] == "Deny"

    @pytest.mark.parametrize("action", ["GetObject", "s3:", "s3 GetObject", ":GetObject"])
    def test_invalid_action_rejected(self, action):
        with pytest.raises(ValidationError):
            _grant(actions=[action])

    @pytest.mark.parametrize("action", ["s3:Get*", "s3:Get?bject", "sqs:*"])
    def test_wildcard_action_allowed(self, action):
        assert _grant(actions=[action]).actions == [action]

    def test_empty_actions_rejected(self):
        with pytest.raises(ValidationError):
            _grant(actions=[])

    def test_invalid_resource_rejected(self):
        with pytest.raises(ValidationError):
            _grant(resources=["my-bucket"])

    def test_star_resource_allowed(self):
        assert _grant(resources=["*"]).resources == ["*"]

    def test_grants_are_immutable(self):
        grant = _grant()
        with pytest.raises(ValidationError):
            grant.key = "other"

    def test_resources_for_substitutes_account(self):
        grant = _grant(resources=["arn:aws:sqs:*:{account}:*"])
        assert grant.resources_for("123456789012") == ["arn:aws:sqs:*:123456789012:*"]

    def test_to_statement(self):
        statement = get_grant("lambda").to_statement("123456789012")

        assert statement == {
            "Action": ["lambda:InvokeFunction", "lambda:GetFunctionConfiguration"],
            "Resource": ["arn:aws:lambda:*:123456789012:function:*"],
            "Effect": "Allow",
        }


class TestCatalog:
    """Test the catalog of grants applied to the demo user."""

    def test_catalog_order(self):
        assert [grant.key for grant in ACCESS_GRANTS] == [
            "s3", "dynamodb-list", "dynamodb", "lambda", "step-functions", "sqs", "sns"
        ]

    def test_only_step_functions_is_managed(self):
        assert [grant.key for grant in ACCESS_GRANTS if grant.managed] == ["step-functions"]

    def test_terraform_names_are_unique(self):
        construct_ids = [g.policy_id for g in ACCESS_GRANTS] + [g.attachment_id for g in ACCESS_GRANTS]
        assert len(construct_ids) == len(set(construct_ids))

    def test_s3_is_account_independent(self):
        assert get_grant("s3").resources_for("123456789012") == ["arn:aws:s3:::*"]

    def test_step_functions_resources(self):
        assert get_grant("step-functions").resources_for("123456789012") == [
            "arn:aws:states:*:123456789012:stateMachine:*",
            "arn:aws:states:*:123456789012:execution:*",
            "arn:aws:states:*:123456789012:activity:*",
        ]

    def test_dynamodb_grants_share_table_arn(self):
        assert get_grant("dynamodb-list").resources == get_grant("dynamodb").resources
        assert get_grant("dynamodb-list").actions == ["dynamodb:ListTables"]

    def test_sns_publish_only(self):
        assert get_grant("sns").actions == ["SNS:Publish"]

    def test_no_grant_uses_star_actions(self):
        for grant in ACCESS_GRANTS:
            assert all(not action.endswith(":*") for action in grant.actions)

    def test_unknown_grant_raises(self):
        with pytest.raises(KeyError):
            get_grant("ec2")


class TestPolicyDocument:
    """Test policy document rendering."""

    def test_single_grant_document(self):
        document = PolicyDocument.for_grant(get_grant("s3"), "123456789012")
        rendered = json.loads(document.to_json())

        assert rendered["Version"] == POLICY_VERSION
        assert rendered["Statement"] == [{
            "Action": [
                "s3:ListBucket",
                "s3:GetObject",
                "s3:PutObject",
                "s3:PutObjectTagging",
                "s3:DeleteObject",
            ],
            "Resource": ["arn:aws:s3:::*"],
            "Effect": "Allow",
        }]

    def test_build_full_document(self):
        document = build_policy_document(account="123456789012")
        assert len(document.statements) == len(ACCESS_GRANTS)

    def test_build_selected_document(self):
        document = build_policy_document([get_grant("sqs"), get_grant("sns")], "123456789012")

        assert [s["Resource"] for s in document.to_dict()["Statement"]] == [
            ["arn:aws:sqs:*:123456789012:*"],
            ["arn:aws:sns:*:123456789012:*"],
        ]
