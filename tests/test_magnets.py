import io
import os

import pytest

from conftest import png_bytes, upload_magnet


def test_upload_keeps_client_position_exactly(client, signup, upload_dir):
    headers = signup("alice")

    response = upload_magnet(client, headers, caption="Beach", positionX=10, positionY=-20, rotation=5)
    body = response.get_json()

    assert response.status_code == 200
    assert body["caption"] == "Beach"
    assert body["fileType"] == "image"
    assert (body["positionX"], body["positionY"], body["rotation"]) == (10.0, -20.0, 5.0)
    assert body["totalMagnets"] == 1
    assert body["url"] == f"/uploads/{body['filePath']}"
    assert os.path.isfile(os.path.join(upload_dir, body["filePath"]))

    magnets = client.get("/api/magnets", headers=headers).get_json()
    assert len(magnets) == 1
    assert magnets[0]["position_x"] == 10.0
    assert magnets[0]["position_y"] == -20.0
    assert magnets[0]["rotation"] == 5.0


def test_upload_defaults_position_and_caption(client, signup):
    headers = signup("alice")

    body = upload_magnet(client, headers, filename="holiday.png").get_json()

    assert body["caption"] == "holiday.png"
    assert (body["positionX"], body["positionY"], body["rotation"]) == (0.0, 0.0, 0.0)


def test_uploaded_file_is_served(client, signup):
    headers = signup("alice")
    data = png_bytes(color=(0, 128, 0))

    body = upload_magnet(client, headers, data=data).get_json()
    response = client.get(body["url"])

    assert response.status_code == 200
    assert response.data == data


def test_upload_without_file_is_rejected(client, signup):
    headers = signup("alice")

    response = client.post("/api/magnets", headers=headers, data={}, content_type="multipart/form-data")

    assert response.status_code == 400
    assert response.get_json()["error"] == "No file uploaded"


def test_upload_rejects_non_media_files(client, signup):
    headers = signup("alice")

    response = client.post(
        "/api/magnets",
        headers=headers,
        data={"file": (io.BytesIO(b"hello"), "notes.txt", "text/plain")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "Only images and videos are allowed"


def test_upload_rejects_corrupt_image(client, signup, upload_dir):
    headers = signup("alice")

    response = upload_magnet(client, headers, data=b"definitely not a png")

    assert response.status_code == 400
    assert response.get_json()["error"] == "File is not a valid image"
    assert os.listdir(upload_dir) == []


def test_upload_rejects_non_numeric_position(client, signup, upload_dir):
    headers = signup("alice")

    response = upload_magnet(client, headers, positionX="left")

    assert response.status_code == 400
    assert os.listdir(upload_dir) == []


def test_video_upload_is_accepted(client, signup):
    headers = signup("alice")

    response = client.post(
        "/api/magnets",
        headers=headers,
        data={"file": (io.BytesIO(b"\x00\x00\x00\x18ftypmp42"), "clip.mp4", "video/mp4")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    assert response.get_json()["fileType"] == "video"
    assert response.get_json()["filePath"].endswith(".mp4")


def test_list_is_newest_first(client, signup):
    headers = signup("alice")
    first = upload_magnet(client, headers, caption="first").get_json()
    second = upload_magnet(client, headers, caption="second").get_json()

    magnets = client.get("/api/magnets", headers=headers).get_json()

    assert [m["id"] for m in magnets] == [second["id"], first["id"]]


def test_list_only_returns_own_magnets(client, signup):
    alice = signup("alice")
    bob = signup("bob")
    upload_magnet(client, alice, caption="alice's")

    assert client.get("/api/magnets", headers=bob).get_json() == []


def test_update_position_round_trip(client, signup):
    headers = signup("alice")
    magnet = upload_magnet(client, headers).get_json()

    response = client.put(
        f"/api/magnets/{magnet['id']}",
        headers=headers,
        json={"positionX": -150.5, "positionY": 275.25, "rotation": -12.5, "caption": "Moved"},
    )
    assert response.get_json() == {"updated": 1}

    stored = client.get("/api/magnets", headers=headers).get_json()[0]
    assert stored["position_x"] == -150.5
    assert stored["position_y"] == 275.25
    assert stored["rotation"] == -12.5
    assert stored["caption"] == "Moved"


def test_update_without_caption_keeps_caption(client, signup):
    headers = signup("alice")
    magnet = upload_magnet(client, headers, caption="Keep me").get_json()

    client.put(
        f"/api/magnets/{magnet['id']}",
        headers=headers,
        json={"positionX": 1, "positionY": 2, "rotation": 3},
    )

    assert client.get("/api/magnets", headers=headers).get_json()[0]["caption"] == "Keep me"


def test_update_requires_all_coordinates(client, signup):
    headers = signup("alice")
    magnet = upload_magnet(client, headers).get_json()

    response = client.put(f"/api/magnets/{magnet['id']}", headers=headers, json={"positionX": 1})

    assert response.status_code == 400


def test_update_of_foreign_magnet_changes_nothing(client, signup):
    alice = signup("alice")
    bob = signup("bob")
    magnet = upload_magnet(client, alice, positionX=10, positionY=10, rotation=0).get_json()

    response = client.put(
        f"/api/magnets/{magnet['id']}",
        headers=bob,
        json={"positionX": 99, "positionY": 99, "rotation": 45},
    )

    assert response.status_code == 200
    assert response.get_json() == {"updated": 0}
    stored = client.get("/api/magnets", headers=alice).get_json()[0]
    assert (stored["position_x"], stored["position_y"], stored["rotation"]) == (10.0, 10.0, 0.0)


def test_delete_removes_row_and_file_once(client, signup, upload_dir):
    headers = signup("alice")
    magnet = upload_magnet(client, headers).get_json()
    path = os.path.join(upload_dir, magnet["filePath"])

    first = client.delete(f"/api/magnets/{magnet['id']}", headers=headers)
    second = client.delete(f"/api/magnets/{magnet['id']}", headers=headers)

    assert first.get_json() == {"deleted": 1}
    assert second.status_code == 200
    assert second.get_json() == {"deleted": 0}
    assert not os.path.exists(path)
    assert client.get("/api/magnets", headers=headers).get_json() == []


def test_delete_of_foreign_magnet_keeps_it(client, signup, upload_dir):
    alice = signup("alice")
    bob = signup("bob")
    magnet = upload_magnet(client, alice).get_json()

    response = client.delete(f"/api/magnets/{magnet['id']}", headers=bob)

    assert response.get_json() == {"deleted": 0}
    assert os.path.isfile(os.path.join(upload_dir, magnet["filePath"]))
    assert len(client.get("/api/magnets", headers=alice).get_json()) == 1


def test_magnet_limit_is_not_enforced_by_default(client, signup):
    headers = signup("alice")

    totals = [upload_magnet(client, headers).get_json()["totalMagnets"] for _ in range(3)]

    assert totals == [1, 2, 3]


def test_magnet_limit_can_be_enforced(app, client, signup, upload_dir):
    app.config["ENFORCE_MAGNET_LIMIT"] = True
    headers = signup("alice")
    upload_magnet(client, headers)
    upload_magnet(client, headers)

    response = upload_magnet(client, headers)

    assert response.status_code == 400
    assert response.get_json()["error"] == "Maximum 2 magnets allowed"
    assert len(os.listdir(upload_dir)) == 2


def test_geometry_exposes_door_bounds(client):
    geometry = client.get("/api/geometry").get_json()

    assert geometry["doorWidth"] == pytest.approx(2.6)
    assert geometry["normalizedScaleX"] == 200.0
    bounds = geometry["normalizedBounds"]
    assert bounds["minX"] == -bounds["maxX"]
    assert 0 < bounds["maxX"] < 200
    assert 0 < bounds["maxY"] < 300


def test_update_rejects_numbers_too_large_for_float(client, signup):
    headers = signup("alice")
    magnet = upload_magnet(client, headers, positionX=10, positionY=10, rotation=0).get_json()

    response = client.put(
        f"/api/magnets/{magnet['id']}",
        headers=headers,
        json={"positionX": 10**400, "positionY": 0, "rotation": 0},
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "positionX must be a finite number"
    stored = client.get("/api/magnets", headers=headers).get_json()[0]
    assert stored["position_x"] == 10.0


def test_upload_rejects_overflowing_position(client, signup, upload_dir):
    headers = signup("alice")

    response = upload_magnet(client, headers, positionY="1" + "0" * 400)

    assert response.status_code == 400
    assert os.listdir(upload_dir) == []


def test_create_magnet_service_rejects_huge_int(app):
    from services.magnets import create_magnet
    from utils.errors import ValidationError

    with app.app_context():
        with pytest.raises(ValidationError):
            create_magnet(1, "a.png", position_x=10**400)


@pytest.mark.parametrize("method", ["put", "delete"])
def test_id_beyond_integer_range_is_not_found(client, signup, method):
    headers = signup("alice")

    response = getattr(client, method)(
        "/api/magnets/9999999999999999999999999",
        headers=headers,
        json={"positionX": 0, "positionY": 0, "rotation": 0},
    )

    assert response.status_code == 404
    assert response.get_json() == {"success": False, "error": "Not found"}
