from __future__ import annotations

import pytest

from depsweep.groups import (
    ALL_GROUPS,
    DependencyGroup,
    ignore_key,
    manifest_table,
    removal_flag,
)
from depsweep.manifest import DependencyEntry
from depsweep.policy import (
    GLOBAL_IGNORES,
    REASON_GLOBAL,
    REASON_LOCAL,
    REASON_OPTIONAL,
    IgnorePolicy,
)


@pytest.mark.parametrize(
    "group,table,key,flag",
    [
        (DependencyGroup.NORMAL, "dependencies", "normal", None),
        (DependencyGroup.DEVELOPMENT, "dev-dependencies", "development", "--dev"),
        (DependencyGroup.BUILD, "build-dependencies", "build", "--build"),
    ],
)
def test_group_lookups(group, table, key, flag) -> None:
    assert manifest_table(group) == table
    assert ignore_key(group) == key
    assert removal_flag(group) == flag


def test_lookups_are_total() -> None:
    assert set(ALL_GROUPS) == set(DependencyGroup)
    for g in DependencyGroup:
        manifest_table(g)
        ignore_key(g)
        removal_flag(g)


def test_unknown_group_rejected() -> None:
    with pytest.raises(ValueError):
        manifest_table("dependencies")


def test_global_ignore_wins() -> None:
    policy = IgnorePolicy({"libc"})
    entry = DependencyEntry("libc", DependencyGroup.NORMAL)

    assert policy.skip_reason(entry) == REASON_GLOBAL
    assert policy.should_skip(entry)


def test_optional_is_skipped_in_every_group() -> None:
    policy = IgnorePolicy(())
    for g in DependencyGroup:
        assert policy.skip_reason(DependencyEntry("x", g, optional=True)) == REASON_OPTIONAL


def test_local_ignores() -> None:
    policy = IgnorePolicy(())
    entry = DependencyEntry("serde", DependencyGroup.NORMAL)

    assert policy.skip_reason(entry, ("serde",)) == REASON_LOCAL
    assert not policy.should_skip(entry, ("tokio",))
    assert not policy.should_skip(entry)


def test_default_policy_uses_compiled_in_set() -> None:
    policy = IgnorePolicy()

    assert policy.global_ignores == GLOBAL_IGNORES
    assert isinstance(policy.global_ignores, frozenset)
