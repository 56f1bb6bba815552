"""pytest plugin that skips excluded test cases.

Enable it with::

    pytest -p compat_excludes.harness.plugin --compat-excludes excludes/

The suite of a collected test is its class name, or the module name for
plain test functions.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from compat_excludes.harness.filter import ExclusionFilter
from compat_excludes.loader import DEFAULT_PATTERN, ErrorPolicy, ExclusionLoader

FILTER_KEY = pytest.StashKey[ExclusionFilter]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("compat-excludes", "exclusion lists for imported suites")
    group.addoption(
        "--compat-excludes",
        dest="compat_excludes",
        metavar="PATH",
        default=None,
        help="Exclusion file or directory of per-suite exclusion files",
    )
    group.addoption(
        "--compat-excludes-pattern",
        dest="compat_excludes_pattern",
        default=DEFAULT_PATTERN,
        help="Glob selecting exclusion files in the directory (default: %(default)s)",
    )
    group.addoption(
        "--compat-excludes-on-error",
        dest="compat_excludes_on_error",
        choices=[policy.value for policy in ErrorPolicy],
        default=ErrorPolicy.ABORT.value,
        help="Abort on a malformed exclusion line, or skip it (default: %(default)s)",
    )


def pytest_configure(config: pytest.Config) -> None:
    path = config.getoption("compat_excludes")
    if not path:
        return

    loader = ExclusionLoader(
        policy=config.getoption("compat_excludes_on_error"),
        pattern=config.getoption("compat_excludes_pattern"),
    )
    result = loader.load_path(Path(path))
    if result.is_err():
        raise pytest.UsageError(f"compat-excludes: {result.unwrap_err()}")

    config.stash[FILTER_KEY] = ExclusionFilter(result.unwrap())


def pytest_report_header(config: pytest.Config) -> list[str]:
    exclusion_filter = config.stash.get(FILTER_KEY, None)
    if exclusion_filter is None:
        return []
    index = exclusion_filter.index
    return [
        f"compat-excludes: {index.total_entries()} exclusions in {len(index)} suites"
    ]


def _suite_name(item: pytest.Item) -> str:
    cls = getattr(item, "cls", None)
    if cls is not None:
        return cls.__name__
    return Path(str(item.path)).stem


def _test_name(item: pytest.Item) -> str:
    return getattr(item, "originalname", None) or item.name


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    exclusion_filter = config.stash.get(FILTER_KEY, None)
    if exclusion_filter is None:
        return

    for item in items:
        decision = exclusion_filter.decide(_suite_name(item), _test_name(item))
        if decision.skip:
            item.add_marker(pytest.mark.skip(reason=decision.reason))
