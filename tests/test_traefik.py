import json

import pytest
import yaml

from landkit.traefik import ConfItem, Router, TraefikConfs, build


@pytest.fixture
def item():
    return ConfItem(
        user_id=3,
        project_id=7,
        deploy_id=11,
        task_id="task1",
        file_name="uuid/hello_20240101.wasm",
        download_url="http://example.com/download/hello.wasm",
        file_hash="hash",
        domain="hello.example.com",
    )


def test_conf_item_json_round_trip(item):
    assert ConfItem.from_json(item.to_json()) == item


def test_conf_item_json_field_order(item):
    keys = list(json.loads(item.to_json()).keys())
    assert keys == [
        "user_id",
        "project_id",
        "deploy_id",
        "task_id",
        "file_name",
        "download_url",
        "file_hash",
        "domain",
    ]


def test_conf_item_missing_field():
    with pytest.raises(ValueError):
        ConfItem.from_json('{"user_id": 1}')


def test_build_headers(item):
    confs = build(item, "land-worker@docker")
    assert confs.middlewares == {
        "m-task1": {
            "x-land-m": item.file_name,
            "x-land-uid": str(item.user_id),
            "x-land-pid": str(item.project_id),
            "x-land-did": str(item.deploy_id),
        }
    }


def test_build_router(item):
    confs = build(item, "land-worker@docker")
    assert confs.routers == {
        "r-task1": Router(
            middlewares=["m-task1"],
            service="land-worker@docker",
            rule="Host(`hello.example.com`)",
        )
    }


def test_to_dict_shape(item):
    data = build(item, "svc").to_dict()
    headers = data["http"]["middlewares"]["m-task1"]["headers"]["customRequestHeaders"]
    assert list(headers) == sorted(headers)
    assert data["http"]["routers"]["r-task1"]["service"] == "svc"


def test_yaml_round_trip(item):
    confs = build(item, "svc")
    assert yaml.safe_load(confs.to_yaml()) == confs.to_dict()


def test_empty_confs():
    assert TraefikConfs().to_dict() == {"http": {"middlewares": {}, "routers": {}}}