from __future__ import annotations

import pytest

from clusterapply.domain.errors import InventoryDecodeError, InventoryEncodeError
from clusterapply.domain.inventory import InventoryRecordCodec, decode_inventory, encode_inventory
from clusterapply.domain.model import InventorySet, ObjectReference
from tests.support.stores import deployment, service


def test_encode_writes_one_key_per_member() -> None:
    payload = encode_inventory([deployment("web"), service("db"), deployment("web")])

    assert payload == {"test_web_apps_Deployment": "", "test_db__Service": ""}


def test_encode_empty_set_is_empty_payload() -> None:
    assert encode_inventory([]) == {}


def test_decode_reads_keys_and_ignores_values() -> None:
    payload = {"test_web_apps_Deployment": "", "test_db__Service": "ignored"}

    assert decode_inventory(payload) == InventorySet.of(deployment("web"), service("db"))


def test_decode_missing_payload_is_empty() -> None:
    assert decode_inventory(None) == InventorySet.empty()
    assert decode_inventory({}) == InventorySet.empty()


def test_decode_surfaces_malformed_key() -> None:
    codec = InventoryRecordCodec()
    payload = {"test_web_apps_Deployment": "", "garbage": ""}

    with pytest.raises(InventoryDecodeError) as exc:
        codec.decode(payload)

    assert exc.value.key == "garbage"
    assert "garbage" in str(exc.value)


def test_decode_of_encode_preserves_members() -> None:
    objects = InventorySet.of(deployment("a"), deployment("b", namespace="other"), service("c"))

    assert decode_inventory(encode_inventory(objects)) == objects


@pytest.mark.parametrize("name", ["my_role", "system__aggregate"])
def test_encode_rejects_names_that_do_not_read_back(name: str) -> None:
    ref = ObjectReference.of("rbac.authorization.k8s.io", "ClusterRole", "", name)

    with pytest.raises(InventoryEncodeError) as exc:
        encode_inventory([deployment("web"), ref])

    assert exc.value.key == str(ref)
