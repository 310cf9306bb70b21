"""Tests for grouping outcomes into report events."""

from fleet_discovery.discovery.models import Diagnostic, InstanceRecord, RegionQueryOutcome
from fleet_discovery.report import (
    DiagnosticLine,
    InstanceLine,
    ProfileHeader,
    RegionHeader,
    ReportAggregator,
)


def _ok(identity_name: str, region: str, *names: str) -> RegionQueryOutcome:
    records = [InstanceRecord(n, f"10.0.0.{i}", region, identity_name) for i, n in enumerate(names, 1)]
    return RegionQueryOutcome.success(identity_name, region, records)


def _feed(aggregator: ReportAggregator, items) -> list:
    events = []
    for item in items:
        events.extend(aggregator.add(item))
    return events


class TestReportAggregator:
    def test_headers_then_lines(self):
        events = ReportAggregator().add(_ok("work", "us-east-1", "web"))
        assert events == [
            ProfileHeader("work", first=True),
            RegionHeader("work", "us-east-1"),
            InstanceLine(InstanceRecord("web", "10.0.0.1", "us-east-1", "work")),
        ]
        assert str(events[2]) == "web - 10.0.0.1"

    def test_one_profile_header_per_contiguous_run(self):
        aggregator = ReportAggregator()
        events = _feed(aggregator, [
            _ok("work", "us-east-1", "a"),
            _ok("work", "eu-west-1", "b"),
            _ok("personal", "us-west-2", "c"),
        ])
        headers = [e for e in events if isinstance(e, ProfileHeader)]
        assert headers == [ProfileHeader("work", True), ProfileHeader("personal", False)]
        regions = [e.region for e in events if isinstance(e, RegionHeader)]
        assert regions == ["us-east-1", "eu-west-1", "us-west-2"]

    def test_empty_region_suppressed(self):
        aggregator = ReportAggregator()
        events = _feed(aggregator, [
            _ok("work", "us-east-1"),
            _ok("work", "eu-west-1", "b"),
            _ok("work", "us-west-2"),
        ])
        assert [e.region for e in events if isinstance(e, RegionHeader)] == ["eu-west-1"]
        assert [g.region for g in aggregator.report[0].regions] == ["eu-west-1"]

    def test_identity_with_only_empty_regions_produces_nothing(self):
        aggregator = ReportAggregator()
        events = _feed(aggregator, [_ok("personal", "us-east-1"), _ok("personal", "eu-west-1")])
        assert events == []
        assert aggregator.report == []

    def test_first_flag_survives_leading_empty_identity(self):
        aggregator = ReportAggregator()
        events = _feed(aggregator, [_ok("personal", "us-east-1"), _ok("work", "us-east-1", "web")])
        assert events[0] == ProfileHeader("work", first=True)

    def test_failures_become_diagnostics_without_touching_grouping(self):
        aggregator = ReportAggregator()
        events = _feed(aggregator, [
            _ok("work", "us-east-1", "a"),
            RegionQueryOutcome.failure("work", "eu-west-1", "Region failure in eu-west-1: throttled"),
            Diagnostic("personal", None, "Error getting regions: denied"),
            _ok("work", "us-west-2", "b"),
        ])
        diagnostics = [e for e in events if isinstance(e, DiagnosticLine)]
        assert [str(d) for d in diagnostics] == [
            "work/eu-west-1: Region failure in eu-west-1: throttled",
            "personal: Error getting regions: denied",
        ]
        assert sum(isinstance(e, ProfileHeader) for e in events) == 1
        assert aggregator.failures == 2
        assert [g.region for g in aggregator.report[0].regions] == ["us-east-1", "us-west-2"]

    def test_report_groups(self):
        aggregator = ReportAggregator()
        _feed(aggregator, [
            _ok("work", "us-east-1", "a", "b"),
            _ok("personal", "us-west-2", "c"),
        ])
        report = aggregator.report
        assert [g.identity_name for g in report] == ["work", "personal"]
        assert report[0].instance_count == 2
        assert [r.display_name for r in report[0].regions[0].records] == ["a", "b"]

    def test_reappearing_identity_opens_new_group(self):
        aggregator = ReportAggregator()
        _feed(aggregator, [
            _ok("work", "us-east-1", "a"),
            _ok("personal", "us-east-1", "b"),
            _ok("work", "eu-west-1", "c"),
        ])
        assert [g.identity_name for g in aggregator.report] == ["work", "personal", "work"]
