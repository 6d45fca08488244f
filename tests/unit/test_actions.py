"""Tests for action selection and the desired-state comparison."""

from __future__ import annotations

from unittest.mock import Mock

from cdbootstrap_operator.constants import FINALIZER
from cdbootstrap_operator.controller import Action, DesiredStateComparator, select_action
from cdbootstrap_operator.exceptions import PlatformError
from cdbootstrap_operator.models import SubresourceKind

from conftest import make_resource, managed_resource


class TestSelectAction:
    """Test cases for select_action."""

    def test_deletion_wins(self):
        """Test that a deletion timestamp selects Delete, even without finalizer."""
        in_desired_state = Mock(return_value=False)
        resource = make_resource(deletion_timestamp="2024-01-01T00:00:00Z")

        assert select_action(resource, in_desired_state) is Action.DELETE
        in_desired_state.assert_not_called()

    def test_missing_finalizer_selects_create(self):
        """Test that a resource without finalizer is created."""
        in_desired_state = Mock(return_value=False)

        assert select_action(make_resource(), in_desired_state) is Action.CREATE
        in_desired_state.assert_not_called()

    def test_other_finalizers_do_not_count(self):
        """Test that only the controller's own finalizer marks a resource as managed."""
        resource = make_resource(finalizers=["other.io/finalizer"])

        assert select_action(resource, Mock(return_value=True)) is Action.CREATE

    def test_drift_selects_update(self):
        """Test that replica drift selects Update."""
        assert select_action(managed_resource(), Mock(return_value=False)) is Action.UPDATE

    def test_in_sync_selects_noop(self):
        """Test that a resource in its desired state selects NoOp."""
        in_desired_state = Mock(return_value=True)
        resource = managed_resource()

        assert select_action(resource, in_desired_state) is Action.NOOP
        in_desired_state.assert_called_once_with(resource)


class TestDesiredStateComparator:
    """Test cases for DesiredStateComparator."""

    def test_matching_replicas(self, fake_client):
        """Test that matching replica counts are in desired state."""
        fake_client.add_object(SubresourceKind.WORKLOAD, "demo", "ns1", {"spec": {"replicas": 3}})

        assert DesiredStateComparator(fake_client).is_in_desired_state(managed_resource())

    def test_differing_replicas(self, fake_client):
        """Test that differing replica counts are not in desired state."""
        fake_client.add_object(SubresourceKind.WORKLOAD, "demo", "ns1", {"spec": {"replicas": 1}})

        assert not DesiredStateComparator(fake_client).is_in_desired_state(managed_resource())

    def test_missing_deployment(self, fake_client):
        """Test that a missing Deployment is not in desired state."""
        assert not DesiredStateComparator(fake_client).is_in_desired_state(managed_resource())

    def test_unreadable_deployment(self, fake_client):
        """Test that a read failure is not in desired state."""
        fake_client.failures[("get", SubresourceKind.WORKLOAD)] = PlatformError("timeout")

        assert not DesiredStateComparator(fake_client).is_in_desired_state(managed_resource())

    def test_unset_replicas_count_as_one(self, fake_client):
        """Test that a Deployment without spec.replicas runs one replica."""
        fake_client.add_object(SubresourceKind.WORKLOAD, "demo", "ns1", {"spec": {}})
        comparator = DesiredStateComparator(fake_client)

        assert not comparator.is_in_desired_state(managed_resource())
        assert comparator.is_in_desired_state(
            managed_resource(spec={"replicas": 1, "url": "u", "pool": "p"}, finalizers=[FINALIZER])
        )
