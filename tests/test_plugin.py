"""
Tests for the pytest plugin.
"""

import pytest

PLUGIN = "compat_excludes.harness.plugin"

SUITE = '''
class TestProcess:
    def test_abort(self):
        assert False

    def test_list(self):
        assert True


def test_wait2():
    assert False


def test_spawn():
    assert True
'''


@pytest.fixture
def suite_pytester(pytester):
    pytester.makepyfile(test_process=SUITE)
    excludes = pytester.mkdir("excludes")
    (excludes / "TestProcess.rb").write_text('exclude :test_abort, "needs investigation"\n')
    (excludes / "test_process.rb").write_text('exclude :test_wait2, "hangs"\n')
    return pytester


class TestPlugin:
    """Tests for skipping collected items."""

    def test_excluded_items_are_skipped(self, suite_pytester):
        """Excluded class methods and functions are skipped with their reason."""
        result = suite_pytester.runpytest("-p", PLUGIN, "--compat-excludes", "excludes", "-rs")

        result.assert_outcomes(passed=2, skipped=2)
        result.stdout.fnmatch_lines([
            "*needs investigation*",
            "*hangs*",
        ])

    def test_report_header(self, suite_pytester):
        """The session header shows how many exclusions were loaded."""
        result = suite_pytester.runpytest("-p", PLUGIN, "--compat-excludes", "excludes")

        result.stdout.fnmatch_lines(["compat-excludes: 2 exclusions in 2 suites"])

    def test_inactive_without_option(self, suite_pytester):
        """Without --compat-excludes nothing is skipped."""
        result = suite_pytester.runpytest("-p", PLUGIN)

        result.assert_outcomes(passed=2, failed=2)

    def test_single_file(self, suite_pytester):
        """A single exclusion file can be passed."""
        result = suite_pytester.runpytest(
            "-p", PLUGIN, "--compat-excludes", "excludes/TestProcess.rb",
        )

        result.assert_outcomes(passed=2, skipped=1, failed=1)

    def test_malformed_file_aborts(self, suite_pytester):
        """A malformed exclusion line is a usage error."""
        (suite_pytester.path / "excludes" / "TestBroken.rb").write_text("exclude :test_x\n")

        result = suite_pytester.runpytest("-p", PLUGIN, "--compat-excludes", "excludes")

        assert result.ret == pytest.ExitCode.USAGE_ERROR
        assert "missing reason" in result.stderr.str()

    def test_malformed_file_skipped_on_request(self, suite_pytester):
        """With the skip policy, bad lines are ignored."""
        (suite_pytester.path / "excludes" / "TestBroken.rb").write_text("exclude :test_x\n")

        result = suite_pytester.runpytest(
            "-p", PLUGIN,
            "--compat-excludes", "excludes",
            "--compat-excludes-on-error", "skip",
        )

        result.assert_outcomes(passed=2, skipped=2)
