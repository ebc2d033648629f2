import pytest

from accutil.names import (
    scan_device_type_id,
    scan_parent_child_ids,
    scan_parent_child_names,
)


def test_device_type_id():
    assert scan_device_type_id("dsa0") == ("dsa", 0)
    assert scan_device_type_id("iax12") == ("iax", 12)


def test_device_type_id_ignores_trailing_text():
    assert scan_device_type_id("dsa3/wq3.0") == ("dsa", 3)


@pytest.mark.parametrize("name", ["dsa", "0dsa", "", "DSA0"])
def test_device_type_id_rejects(name):
    with pytest.raises(ValueError):
        scan_device_type_id(name)


def test_parent_child_names():
    assert scan_parent_child_names("dsa0/wq0.1") == ("dsa0", "wq0.1")
    assert scan_parent_child_names("iax1/group1.0") == ("iax1", "group1.0")


@pytest.mark.parametrize("name", ["dsa0", "/wq0.1", "dsa0/", ""])
def test_parent_child_names_rejects(name):
    with pytest.raises(ValueError):
        scan_parent_child_names(name)


def test_parent_child_ids():
    assert scan_parent_child_ids("wq0.1") == (0, 1)
    assert scan_parent_child_ids("engine2.3") == (2, 3)


@pytest.mark.parametrize("name", ["wq0", "wq.1", "0.1", "wq0-1"])
def test_parent_child_ids_rejects(name):
    with pytest.raises(ValueError):
        scan_parent_child_ids(name)


def test_names_and_ids_agree():
    parent, child = scan_parent_child_names("dsa4/wq4.7")
    dev_type, dev_id = scan_device_type_id(parent)
    parent_id, child_id = scan_parent_child_ids(child)
    assert dev_type == "dsa"
    assert dev_id == parent_id == 4
    assert child_id == 7