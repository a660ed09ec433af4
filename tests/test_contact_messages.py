MESSAGE = {"name": "Mona", "email": "mona@example.com", "phone": "01099999999", "message": "Do you deliver to Giza?"}


def submit(client, **overrides):
    return client.post("/api/v1/contact-messages", json=dict(MESSAGE, **overrides))


def test_submit_is_public(client):
    res = submit(client)

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "تم إرسال الرسالة بنجاح"
    assert body["data"]["isRead"] is False
    assert body["data"]["isReplied"] is False


def test_submit_validates_email(client):
    res = submit(client, email="not-an-email")

    assert res.status_code == 400
    assert res.json()["error"] == "Validation failed"
    assert "email" in res.json()["details"]


def test_admin_workflow(client, admin_headers):
    first = submit(client).json()["data"]
    submit(client, name="Omar")

    assert client.get("/api/v1/contact-messages").status_code == 401

    read = client.patch(f"/api/v1/contact-messages/{first['id']}/mark-read", headers=admin_headers).json()["data"]
    assert read["isRead"] is True
    replied = client.patch(f"/api/v1/contact-messages/{first['id']}/mark-replied", headers=admin_headers).json()["data"]
    assert replied["isReplied"] is True

    unread = client.get("/api/v1/contact-messages", params={"isRead": "false"}, headers=admin_headers).json()["data"]
    assert [m["name"] for m in unread] == ["Omar"]

    stats = client.get("/api/v1/contact-messages/stats/overview", headers=admin_headers).json()["data"]
    assert stats == {"total": 2, "unread": 1, "read": 1, "replied": 1}


def test_update_notes_and_delete(client, admin_headers):
    message = submit(client).json()["data"]

    res = client.put(
        f"/api/v1/contact-messages/{message['id']}", json={"notes": "called back"}, headers=admin_headers
    )
    assert res.json()["data"]["notes"] == "called back"
    assert res.json()["data"]["isRead"] is False

    assert client.delete(f"/api/v1/contact-messages/{message['id']}", headers=admin_headers).status_code == 200
    missing = client.get(f"/api/v1/contact-messages/{message['id']}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "الرسالة غير موجودة"
