from typing import Literal, get_args
from urllib.parse import unquote

import pytest
from ninjaone_mcp.core.filters import Clause, build_device_filter, encode_df


@pytest.mark.parametrize(
    "clauses",
    [[], [None], [None, None, None], [None, False, ""]],
)
def test_all_absent_returns_none(clauses):
    assert encode_df(clauses) is None


def test_present_clauses_joined_in_order():
    encoded = encode_df([None, "org = 3", None, "status eq APPROVED", "online"])
    assert unquote(encoded) == "org = 3 AND status eq APPROVED AND online"


def test_encoding_matches_uri_component_rules():
    encoded = encode_df(["class in (MAC,LINUX_SERVER)", "name = a/b&c"])
    assert encoded == (
        "class%20in%20(MAC%2CLINUX_SERVER)%20AND%20name%20%3D%20a%2Fb%26c"
    )
    assert " " not in encoded


def test_single_clause_has_no_separator():
    assert encode_df(["offline"]) == "offline"


def test_encode_is_pure():
    clauses = ["org = 1", None, "online"]
    assert encode_df(clauses) == encode_df(clauses)
    assert clauses == ["org = 1", None, "online"]


def test_build_device_filter_all_fields():
    df = build_device_filter(
        org_id=5,
        status="APPROVED",
        class_in=["WINDOWS_SERVER", "MAC"],
        online=False,
    )
    assert unquote(df) == (
        "org = 5 AND status eq APPROVED AND class in (WINDOWS_SERVER,MAC) AND offline"
    )


def test_build_device_filter_skips_empty_inputs():
    assert build_device_filter() is None
    assert build_device_filter(class_in=[]) is None
    assert unquote(build_device_filter(online=True)) == "online"
    assert unquote(build_device_filter(org_id="12")) == "org = 12"


def test_clause_type_admits_only_false_as_a_bool():
    assert Literal[False] in get_args(Clause)
    assert bool not in get_args(Clause)


@pytest.mark.parametrize("org_id", [0, "", None])
def test_build_device_filter_treats_falsy_org_as_absent(org_id):
    assert build_device_filter(org_id=org_id) is None
    assert unquote(build_device_filter(org_id=org_id, online=True)) == "online"
