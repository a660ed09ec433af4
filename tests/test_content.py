PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


def test_second_homepage_content_replaces_first(client, admin_headers, db):
    first = client.post("/api/v1/homepage/content", json={"heroTitle": "first"}, headers=admin_headers).json()["data"]
    second = client.post("/api/v1/homepage/content", json={"heroTitle": "second"}, headers=admin_headers).json()["data"]

    assert second["isActive"] is True
    assert db.get_document_by_id("homepagecontent", first["id"])["isActive"] is False
    assert db.count_documents("homepagecontent", {"isActive": True}) == 1
    active = client.get("/api/v1/homepage/content").json()["data"]
    assert active["id"] == second["id"]
    assert active["heroTitle"] == "second"


def test_homepage_content_seeds_default(client, db):
    res = client.get("/api/v1/homepage/content")

    assert res.status_code == 200
    assert res.json()["data"]["heroButtonLink2"] == "/products?type=WHOLESALE"
    assert db.count_documents("homepagecontent") == 1
    client.get("/api/v1/homepage/content")
    assert db.count_documents("homepagecontent") == 1


def test_homepage_upload_failure_drops_image(client, admin_headers, uploader):
    uploader.fail = True

    res = client.post(
        "/api/v1/homepage/content",
        json={"heroTitle": "hero", "heroBackgroundImage1": PNG_DATA_URI},
        headers=admin_headers,
    )

    assert res.status_code == 201
    assert res.json()["data"]["heroBackgroundImage1"] is None


def test_homepage_content_update_keeps_active_flag(client, admin_headers):
    content = client.post("/api/v1/homepage/content", json={"heroTitle": "hero"}, headers=admin_headers).json()["data"]

    res = client.put(
        f"/api/v1/homepage/content/{content['id']}/with-images",
        json={"sectionFourImage": PNG_DATA_URI},
        headers=admin_headers,
    )

    data = res.json()["data"]
    assert data["sectionFourImage"].startswith("https://res.cloudinary.com/demo/homepage/")
    assert data["heroTitle"] == "hero"
    assert data["isActive"] is True


def test_about_us_active(client, admin_headers, uploader):
    missing = client.get("/api/v1/about-us/active")
    assert missing.status_code == 404
    assert missing.json()["error"] == "لا يوجد محتوى نشط"

    res = client.post(
        "/api/v1/about-us",
        json={
            "heroTitle": "من نحن",
            "visionImage": PNG_DATA_URI,
            "values": [{"title": "الجودة", "image": PNG_DATA_URI}, {"title": "الأمانة"}],
        },
        headers=admin_headers,
    )
    assert res.status_code == 201

    active = client.get("/api/v1/about-us/active").json()["data"]
    assert active["heroTitle"] == "من نحن"
    assert active["visionImage"].startswith("https://res.cloudinary.com/demo/about-us/")
    assert active["values"][0]["image"].startswith("https://res.cloudinary.com/demo/about-us/values/")
    assert active["values"][1]["image"] is None


def test_about_us_upload_failure_is_an_error(client, admin_headers, uploader):
    uploader.fail = True

    res = client.post("/api/v1/about-us", json={"heroImage": PNG_DATA_URI}, headers=admin_headers)

    assert res.status_code == 502


def test_about_us_delete(client, admin_headers):
    content = client.post("/api/v1/about-us", json={"heroTitle": "x"}, headers=admin_headers).json()["data"]

    assert client.delete(f"/api/v1/about-us/{content['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/v1/about-us/active").status_code == 404


def test_toggle_activates_one_record(client, admin_headers):
    first = client.post("/api/v1/contact-info", json={"phone": "111"}, headers=admin_headers).json()["data"]
    second = client.post("/api/v1/contact-info", json={"phone": "222"}, headers=admin_headers).json()["data"]
    assert client.get("/api/v1/contact-info/active").json()["data"]["id"] == second["id"]

    res = client.patch(f"/api/v1/contact-info/{first['id']}/toggle-active", headers=admin_headers)

    assert res.json()["data"]["isActive"] is True
    records = {c["id"]: c["isActive"] for c in client.get("/api/v1/contact-info", headers=admin_headers).json()["data"]}
    assert records == {first["id"]: True, second["id"]: False}
    assert client.get("/api/v1/contact-info/active").json()["data"]["phone"] == "111"


def test_contact_info_update_cannot_activate(client, admin_headers, db):
    first = client.post("/api/v1/contact-info", json={"phone": "111"}, headers=admin_headers).json()["data"]
    client.post("/api/v1/contact-info", json={"phone": "222"}, headers=admin_headers)

    res = client.patch(
        f"/api/v1/contact-info/{first['id']}", json={"phone": "333", "isActive": True}, headers=admin_headers
    )

    assert res.json()["data"]["phone"] == "333"
    assert res.json()["data"]["isActive"] is False
    assert db.count_documents("contactinfo", {"isActive": True}) == 1


def test_homepage_sections(client, db, make_product, category):
    featured = make_product(nameAr="قاروص", isFeatured=True)
    top = make_product(nameAr="جمبري", isBestSeller=True)
    runner_up = make_product(nameAr="كابوريا", isBestSeller=True, isNewArrival=True)
    db.increment_fields("product", {"nameAr": "جمبري"}, {"salesCount": 9})
    db.increment_fields("product", {"nameAr": "كابوريا"}, {"salesCount": 2})

    res = client.get("/api/v1/homepage/featured-products")
    assert res.json()["count"] == 1
    card = res.json()["data"][0]
    assert card["id"] == featured["id"]
    assert card["category"] == {"nameAr": "أسماك طازجة"}

    sellers = client.get("/api/v1/homepage/best-sellers").json()["data"]
    assert [p["id"] for p in sellers] == [top["id"], runner_up["id"]]
    assert sellers[0]["salesCount"] == 9

    arrivals = client.get("/api/v1/homepage/new-arrivals", params={"limit": 5}).json()
    assert [p["id"] for p in arrivals["data"]] == [runner_up["id"]]

    categories = client.get("/api/v1/homepage/categories").json()
    assert categories["count"] == 1
    assert categories["data"][0]["id"] == category["id"]

    everything = client.get("/api/v1/homepage/all-data").json()["data"]
    assert set(everything) == {"featuredProducts", "bestSellers", "categories"}
    assert len(everything["bestSellers"]) == 2
