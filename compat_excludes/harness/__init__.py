"""Harness-side application of exclusion lists.

The pytest plugin lives in ``compat_excludes.harness.plugin`` and is not
imported here, so using the filter does not require pytest.
"""

from compat_excludes.harness.filter import ExclusionFilter

__all__ = ["ExclusionFilter"]
