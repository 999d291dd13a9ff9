import pytest

from scanmap.json_utils import save_scan_map
from web.server import create_app


@pytest.fixture
def map_path(tmp_path, sample_map):
    path = tmp_path / "survey.json"
    save_scan_map(sample_map, path)
    return path


@pytest.fixture
def client(map_path):
    app = create_app(str(map_path))
    app.config["TESTING"] = True
    return app.test_client()


def test_map_overview(client):
    response = client.get("/api/map")

    assert response.status_code == 200
    data = response.get_json()
    assert data["name"] == "Office"
    assert data["node_count"] == 3
    assert data["network_count"] == 3


def test_nodes_table(client):
    data = client.get("/api/nodes").get_json()

    assert data["count"] == 3
    assert data["nodes"][1] == {"index": 1, "x": 3.5, "y": -2.25, "z": 1.2, "notes": ""}


def test_single_node_includes_networks(client):
    data = client.get("/api/nodes/0").get_json()

    assert data["index"] == 0
    assert data["position"] == {"x": 0.0, "y": 0.0, "z": 1.2}
    assert [net["mac"] for net in data["networks"]] == ["00:11:22:33:44:55", "66:77:88:99:aa:bb"]


def test_unknown_node_is_404(client):
    assert client.get("/api/nodes/3").status_code == 404


def test_networks_table(client):
    data = client.get("/api/networks").get_json()

    assert data["count"] == 3
    assert [row["node_index"] for row in data["networks"]] == [0, 0, 2]
    assert data["networks"][0]["channel"] == "036"


def test_csv_export(client):
    response = client.get("/api/export/networks.csv")

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    lines = response.get_data(as_text=True).splitlines()
    assert lines[0] == "node_index,mac,ssid,channel,strength,time_scanned"
    assert len(lines) == 4


def test_nodes_csv_export(client):
    lines = client.get("/api/export/nodes.csv").get_data(as_text=True).splitlines()

    assert lines[0] == "index,x,y,z,notes"
    assert len(lines) == 4


def test_map_changes_are_picked_up(client, map_path, sample_map):
    sample_map.nodes.pop()
    save_scan_map(sample_map, map_path)

    assert client.get("/api/map").get_json()["node_count"] == 2


def test_missing_map_is_404(tmp_path):
    client = create_app(str(tmp_path / "missing.json")).test_client()

    response = client.get("/api/map")

    assert response.status_code == 404
    assert "not found" in response.get_json()["error"]


def test_corrupt_map_is_500(tmp_path):
    path = tmp_path / "survey.json"
    path.write_text("{broken", encoding="utf-8")
    client = create_app(str(path)).test_client()

    response = client.get("/api/nodes")

    assert response.status_code == 500
    assert "error" in response.get_json()
