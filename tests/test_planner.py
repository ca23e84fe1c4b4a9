"""Tests for update planning."""

from constants import Constants, SemverLimit
from registry.npm.client import FetchError
from updater.planner import (
    build_class_index,
    current_specifier,
    plan_updates,
    rank,
    sort_for_display,
)
from versioning.models import DependencyClass, FetchOutcome, Severity, UpdateCandidate


def _ok(name, version):
    return FetchOutcome(name=name, version=version)


class TestBuildClassIndex:
    """Test the one-shot name classification."""

    def test_precedence_dev_then_peer_then_production(self):
        index = build_class_index(
            dev_names=["both", "dev-only"],
            peer_names=["both", "peer-only", "peer-prod"],
            production_names=["both", "peer-prod", "prod-only"],
        )

        assert index["both"] is DependencyClass.DEV
        assert index["dev-only"] is DependencyClass.DEV
        assert index["peer-only"] is DependencyClass.PEER
        assert index["peer-prod"] is DependencyClass.PEER
        assert index["prod-only"] is DependencyClass.PRODUCTION


class TestCurrentSpecifier:
    """Test specifier lookup."""

    def test_reads_from_selected_section(self):
        manifest = {"dependencies": {"a": "^1.0.0"}, "devDependencies": {"a": "~2.0.0"}}
        assert current_specifier(manifest, "a", DependencyClass.DEV) == "~2.0.0"
        assert current_specifier(manifest, "a", DependencyClass.PRODUCTION) == "^1.0.0"

    def test_missing_is_sentinel(self):
        assert current_specifier({}, "a", DependencyClass.PEER) == Constants.VERSION_NOT_FOUND
        assert current_specifier({"dependencies": {"a": 1}}, "a", DependencyClass.PRODUCTION) == Constants.VERSION_NOT_FOUND


class TestPlanUpdates:
    """Test candidate selection."""

    def test_left_pad_scenario(self):
        manifest = {"dependencies": {"left-pad": "^1.0.0"}}

        candidates = plan_updates([_ok("left-pad", "1.3.0")], manifest)

        assert len(candidates) == 1
        candidate = candidates[0]
        assert (candidate.name, candidate.latest, candidate.dependency_class) == (
            "left-pad",
            "1.3.0",
            DependencyClass.PRODUCTION,
        )
        assert candidate.current == "^1.0.0"
        assert candidate.severity is Severity.MINOR

    def test_up_to_date_is_excluded(self):
        manifest = {"dependencies": {"a": "^2.0.0", "b": "3.1.0"}}

        assert plan_updates([_ok("a", "2.0.0"), _ok("b", "3.0.9")], manifest) == []

    def test_dev_and_peer_classes(self):
        manifest = {
            "dependencies": {"p": "1.0.0"},
            "devDependencies": {"d": "1.0.0"},
            "peerDependencies": {"q": "1.0.0"},
        }
        outcomes = [_ok("p", "1.0.1"), _ok("d", "1.0.1"), _ok("q", "1.0.1")]

        candidates = plan_updates(outcomes, manifest, dev_names=["d"], peer_names=["q"])

        classes = {c.name: c.dependency_class for c in candidates}
        assert classes == {
            "p": DependencyClass.PRODUCTION,
            "d": DependencyClass.DEV,
            "q": DependencyClass.PEER,
        }

    def test_duplicate_across_sections_uses_dev_specifier(self):
        """A name in both sections is compared against its dev specifier."""
        manifest = {"dependencies": {"a": "1.0.0"}, "devDependencies": {"a": "2.0.0"}}

        candidates = plan_updates([_ok("a", "1.5.0")], manifest, dev_names=["a"])

        assert candidates == []

    def test_wildcard_excluded_by_default(self):
        manifest = {"dependencies": {"any": "*"}}

        assert plan_updates([_ok("any", "4.0.0")], manifest) == []

    def test_wildcard_included_with_update_any(self):
        manifest = {"dependencies": {"any": "*", "gone": "*"}}
        outcomes = [_ok("any", "4.0.0"), _ok("gone", Constants.VERSION_NOT_FOUND)]

        candidates = plan_updates(outcomes, manifest, update_any_wildcard=True)

        assert [c.name for c in candidates] == ["any", "gone"]
        assert candidates[0].severity is Severity.MAJOR
        assert candidates[1].severity is Severity.NONE

    def test_unparseable_versions_are_skipped(self):
        manifest = {"dependencies": {"range": ">=1.0.0 <2.0.0", "tag": "latest", "ok": "1.0.0"}}
        outcomes = [_ok("range", "1.5.0"), _ok("tag", "2.0.0"), _ok("ok", Constants.VERSION_NOT_FOUND)]

        assert plan_updates(outcomes, manifest, update_any_wildcard=True) == []

    def test_failed_outcomes_go_to_error_sink(self):
        manifest = {"dependencies": {"a": "1.0.0", "b": "1.0.0"}}
        failed = FetchOutcome(name="b", error=FetchError("b", "registry responded with HTTP 404"))
        reported = []

        candidates = plan_updates([_ok("a", "1.1.0"), failed], manifest, on_error=reported.append)

        assert [c.name for c in candidates] == ["a"]
        assert reported == [failed]

    def test_failed_outcomes_logged_by_default(self, caplog):
        failed = FetchOutcome(name="b", error=FetchError("b", "boom"))

        assert plan_updates([failed], {"dependencies": {"b": "1.0.0"}}) == []
        assert "b: boom" in caplog.text

    def test_semver_limit(self):
        manifest = {"dependencies": {"maj": "1.0.0", "min": "1.0.0", "pat": "1.0.0"}}
        outcomes = [_ok("maj", "2.0.0"), _ok("min", "1.1.0"), _ok("pat", "1.0.1")]

        minor = plan_updates(outcomes, manifest, semver_limit=SemverLimit.MINOR)
        patch = plan_updates(outcomes, manifest, semver_limit=SemverLimit.PATCH)

        assert [c.name for c in minor] == ["min", "pat"]
        assert [c.name for c in patch] == ["pat"]

    def test_manifest_not_modified(self):
        manifest = {"dependencies": {"a": "^1.0.0"}}

        plan_updates([_ok("a", "2.0.0")], manifest)

        assert manifest == {"dependencies": {"a": "^1.0.0"}}


class TestRanking:
    """Test display ordering."""

    def _candidate(self, name, severity):
        return UpdateCandidate(name, "9.9.9", DependencyClass.PRODUCTION, "1.0.0", severity)

    def test_rank_values(self):
        assert rank(self._candidate("a", Severity.MAJOR)) == 1
        assert rank(self._candidate("a", Severity.MINOR)) == 2
        assert rank(self._candidate("a", Severity.PATCH)) == 3
        assert rank(self._candidate("a", Severity.NONE)) == 4

    def test_sort_is_stable_by_severity(self):
        candidates = [
            self._candidate("p1", Severity.PATCH),
            self._candidate("M1", Severity.MAJOR),
            self._candidate("m1", Severity.MINOR),
            self._candidate("M2", Severity.MAJOR),
        ]

        assert [c.name for c in sort_for_display(candidates)] == ["M1", "M2", "m1", "p1"]
