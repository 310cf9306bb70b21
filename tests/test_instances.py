"""Tests for the instance fetcher and its projection of DescribeInstances pages."""

import asyncio

from fakes import FakeProvider, describe_instances_response, identity, raw_instance

from fleet_discovery.discovery.instances import fetch_instances, instance_name, project_instances
from fleet_discovery.discovery.models import InstanceRecord
from fleet_discovery.exceptions import ProviderError


class TestInstanceName:
    def test_name_tag_value(self):
        assert instance_name(raw_instance("web")) == "web"

    def test_name_found_regardless_of_tag_order(self):
        raw = raw_instance(tags=[
            {"Key": "env", "Value": "prod"},
            {"Key": "Name", "Value": "api"},
            {"Key": "team", "Value": "infra"},
        ])
        assert instance_name(raw) == "api"

    def test_first_name_tag_wins(self):
        raw = raw_instance(tags=[{"Key": "Name", "Value": "first"}, {"Key": "Name", "Value": "second"}])
        assert instance_name(raw) == "first"

    def test_key_match_is_exact(self):
        raw = raw_instance(tags=[{"Key": "name", "Value": "lower"}, {"Key": "Name ", "Value": "space"}])
        assert instance_name(raw) == "N/A"

    def test_no_tags(self):
        assert instance_name({"InstanceId": "i-1"}) == "N/A"
        assert instance_name(raw_instance(tags=[])) == "N/A"


class TestProjectInstances:
    def test_public_instance_projected(self):
        outcome = project_instances(
            describe_instances_response(raw_instance("web", "1.2.3.4")), "work", "us-east-1"
        )
        assert outcome.ok
        assert outcome.records == (InstanceRecord("web", "1.2.3.4", "us-east-1", "work"),)

    def test_addressless_instance_excluded_by_default(self):
        outcome = project_instances(
            describe_instances_response(raw_instance("db"), raw_instance("web", "1.2.3.4")),
            "work", "us-east-1",
        )
        assert [r.display_name for r in outcome.records] == ["web"]

    def test_addressless_instance_included_with_sentinel(self):
        outcome = project_instances(
            describe_instances_response(raw_instance("db")), "work", "us-east-1", include_addressless=True
        )
        assert outcome.records == (InstanceRecord("db", "N/A", "us-east-1", "work"),)

    def test_flattens_reservations_in_order(self):
        response = {
            "Reservations": [
                {"Instances": [raw_instance("a", "1.1.1.1"), raw_instance("b", "2.2.2.2")]},
                {},
                {"Instances": [raw_instance("c", "3.3.3.3")]},
            ]
        }
        outcome = project_instances(response, "work", "eu-west-1")
        assert [str(r) for r in outcome.records] == ["a - 1.1.1.1", "b - 2.2.2.2", "c - 3.3.3.3"]

    def test_empty_listing_is_success(self):
        outcome = project_instances({"Reservations": []}, "work", "us-east-1")
        assert outcome.ok
        assert outcome.records == ()

    def test_missing_reservations_is_failure(self):
        outcome = project_instances({}, "work", "us-east-1")
        assert not outcome.ok
        assert outcome.error == "No reservations"
        assert outcome.records == ()


class TestFetchInstances:
    def test_uses_identity_and_region(self):
        provider = FakeProvider(instances={
            ("work", "us-east-1"): describe_instances_response(raw_instance("web", "1.2.3.4")),
        })
        outcome = asyncio.run(fetch_instances(provider, identity("work"), "us-east-1"))
        assert provider.instance_calls == [("work", "us-east-1")]
        assert outcome.identity_name == "work"
        assert outcome.region == "us-east-1"
        assert [str(r) for r in outcome.records] == ["web - 1.2.3.4"]

    def test_provider_error_captured_as_failure(self):
        provider = FakeProvider(instances={("work", "ap-south-1"): ProviderError("AuthFailure")})
        outcome = asyncio.run(fetch_instances(provider, identity("work"), "ap-south-1"))
        assert not outcome.ok
        assert outcome.error == "Region failure in ap-south-1: AuthFailure"
        diagnostic = outcome.diagnostic()
        assert diagnostic.identity_name == "work"
        assert diagnostic.region == "ap-south-1"
