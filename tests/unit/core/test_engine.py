import pytest

from kvault import EngineVersion, EngineVersionMap, EngineVersionResolver
from kvault.engine import mount_prefix
from kvault.mounts import parse_mount_versions


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1", EngineVersion.V1),
        ("2", EngineVersion.V2),
        (2, EngineVersion.V2),
        (None, EngineVersion.UNKNOWN),
        ("", EngineVersion.UNKNOWN),
        ("3", EngineVersion.UNKNOWN),
        (True, EngineVersion.UNKNOWN),
    ],
)
def test_parse_engine_version(value, expected):
    assert EngineVersion.parse(value) is expected


def test_mount_prefix():
    assert mount_prefix("secret/app/foo") == "secret/"
    assert mount_prefix("/secret") == "secret/"
    assert mount_prefix("team/kv/app", prefix_depth=2) == "team/kv/"


def test_map_normalises_keys_and_is_read_only():
    versions = EngineVersionMap({"secret": "2", "/legacy/": 1})

    assert dict(versions) == {"secret/": EngineVersion.V2, "legacy/": EngineVersion.V1}
    with pytest.raises(TypeError):
        versions["other/"] = EngineVersion.V2  # type: ignore[index]


def test_resolver_looks_up_mount_prefix():
    resolver = EngineVersionResolver(EngineVersionMap({"secret/": "2", "old/": "1"}))

    assert resolver.resolve("secret/app/foo") is EngineVersion.V2
    assert resolver.resolve("secret") is EngineVersion.V2
    assert resolver.resolve("old/thing") is EngineVersion.V1


def test_missing_prefix_is_unknown_without_fallback():
    resolver = EngineVersionResolver(EngineVersionMap({"secret/": "2"}))
    assert resolver.resolve("cubbyhole/x") is EngineVersion.UNKNOWN


def test_missing_prefix_uses_global_fallback():
    resolver = EngineVersionResolver(EngineVersionMap({"old/": "1"}, default=EngineVersion.V2))

    assert resolver.resolve("new/x") is EngineVersion.V2
    assert resolver.resolve("old/x") is EngineVersion.V1


def test_resolver_with_deeper_prefix():
    resolver = EngineVersionResolver(EngineVersionMap({"team/kv/": "2"}), prefix_depth=2)
    assert resolver.resolve("team/kv/app") is EngineVersion.V2
    assert resolver.resolve("team/other/app") is EngineVersion.UNKNOWN


def test_resolver_rejects_zero_depth():
    with pytest.raises(ValueError):
        EngineVersionResolver(EngineVersionMap(), prefix_depth=0)


def test_parse_mount_versions_prefers_data_member():
    payload = {
        "request_id": "abc",
        "data": {
            "secret/": {"type": "kv", "options": {"version": "2"}},
            "kv1/": {"type": "kv", "options": {"version": "1"}},
            "cubbyhole/": {"type": "cubbyhole", "options": None},
            "sys/": {"type": "system"},
        },
    }

    assert parse_mount_versions(payload) == {
        "secret/": EngineVersion.V2,
        "kv1/": EngineVersion.V1,
        "cubbyhole/": EngineVersion.UNKNOWN,
        "sys/": EngineVersion.UNKNOWN,
    }


def test_parse_mount_versions_top_level_listing():
    payload = {
        "secret/": {"type": "kv", "options": {"version": "2"}},
        "lease_id": "",
        "renewable": False,
    }
    assert parse_mount_versions(payload) == {"secret/": EngineVersion.V2}
