def question_texts(survey):
    return [q["question_text"] for q in survey["questions"]]

def test_health(client):
    assert client.get("/health").json() == {"ok": True}

def test_company_lookup(client, company):
    assert company["domain"] == "acme.com"
    r = client.get("/api/companies/lookup", params={"domain": "ACME.com"})
    assert r.json()["exists"] is True
    assert r.json()["company"]["id"] == company["id"]
    assert client.get("/api/companies/lookup", params={"domain": "nope.io"}).json() == {"exists": False, "company": None}

def test_domain_check(client, company):
    body = client.get("/api/companies/domain-check", params={"email": "boss@acme.com"}).json()
    assert body["is_business"] is True
    assert body["company"]["name"] == "Acme"
    body = client.get("/api/companies/domain-check", params={"email": "me@gmail.com"}).json()
    assert body == {"domain": "gmail.com", "is_business": False, "company": None}
    assert client.get("/api/companies/domain-check", params={"email": "nobody"}).status_code == 400

def test_get_missing_company(client):
    assert client.get("/api/companies/999").status_code == 404

def test_create_survey_orders_questions(client, published_survey):
    qs = published_survey["questions"]
    assert [q["order"] for q in qs] == [0, 1, 2, 3]
    assert qs[0]["options"] is None
    assert qs[1]["options"] == ["Yes", "No"]

def test_create_survey_needs_existing_company(client):
    r = client.post("/api/surveys", json={"company_id": 42, "title": "x"})
    assert r.status_code == 400

def test_create_survey_rejects_blank_title(client, company):
    r = client.post("/api/surveys", json={"company_id": company["id"], "title": "   "})
    assert r.status_code == 422

def test_choice_question_needs_options(client, company):
    r = client.post("/api/surveys", json={
        "company_id": company["id"],
        "title": "x",
        "questions": [{"question_text": "Pick", "question_type": "single_choice", "options": [" ", ""]}],
    })
    assert r.status_code == 422

def test_update_replaces_questions_with_dense_order(client, published_survey):
    sid = published_survey["id"]
    r = client.put(f"/api/surveys/{sid}", json={
        "title": "Renamed",
        "questions": [
            {"question_text": "Only one", "question_type": "long_text"},
            {"question_text": "And a date", "question_type": "date", "required": True},
        ],
    })
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Renamed"
    assert question_texts(body) == ["Only one", "And a date"]
    assert [q["order"] for q in body["questions"]] == [0, 1]

def test_update_without_questions_keeps_them(client, published_survey):
    sid = published_survey["id"]
    body = client.put(f"/api/surveys/{sid}", json={"description": "hello"}).json()
    assert body["description"] == "hello"
    assert question_texts(body) == question_texts(published_survey)

def test_list_and_delete(client, company, published_survey):
    listed = client.get("/api/surveys", params={"company_id": company["id"]}).json()
    assert [s["id"] for s in listed] == [published_survey["id"]]
    assert client.delete(f"/api/surveys/{published_survey['id']}").status_code == 204
    assert client.get(f"/api/surveys/{published_survey['id']}").status_code == 404

def test_publish_flow_and_public_view(client, company):
    draft = client.post("/api/surveys", json={
        "company_id": company["id"],
        "title": "Draft",
        "questions": [{"question_text": "Why?", "question_type": "short_text"}],
    }).json()
    assert client.get(f"/api/public/surveys/{draft['id']}").status_code == 404

    assert client.post(f"/api/surveys/{draft['id']}/publish").json()["is_published"] is True
    public = client.get(f"/api/public/surveys/{draft['id']}").json()
    assert public["company"]["name"] == "Acme"
    assert public["survey"]["title"] == "Draft"

    assert client.post(f"/api/surveys/{draft['id']}/unpublish").json()["is_published"] is False
    assert client.get(f"/api/public/surveys/{draft['id']}").status_code == 404

def test_publish_needs_questions(client, company):
    empty = client.post("/api/surveys", json={"company_id": company["id"], "title": "Empty"}).json()
    assert client.post(f"/api/surveys/{empty['id']}/publish").status_code == 400

def test_wait_published_returns_immediately_for_published(client, published_survey):
    body = client.get(f"/api/surveys/{published_survey['id']}/wait-published").json()
    assert body == {"survey_id": published_survey["id"], "is_published": True, "outcome": "satisfied"}

def test_wait_published_gives_up_after_max_attempts(client, company):
    draft = client.post("/api/surveys", json={"company_id": company["id"], "title": "Draft"}).json()
    body = client.get(f"/api/surveys/{draft['id']}/wait-published").json()
    assert body["is_published"] is False
    assert body["outcome"] in ("exhausted", "stopped")

def test_wait_published_missing_survey(client):
    assert client.get("/api/surveys/404/wait-published").status_code == 404

def test_add_and_remove_single_questions_keep_order_dense(client, published_survey):
    sid = published_survey["id"]
    body = client.post(f"/api/surveys/{sid}/questions", json={"question_text": "Extra", "question_type": "date"}).json()
    assert [q["order"] for q in body["questions"]] == [0, 1, 2, 3, 4]
    assert body["questions"][-1]["question_text"] == "Extra"

    second = body["questions"][1]["id"]
    body = client.delete(f"/api/surveys/{sid}/questions/{second}").json()
    assert [q["order"] for q in body["questions"]] == [0, 1, 2, 3]
    assert "Do you like it?" not in question_texts(body)

    assert client.delete(f"/api/surveys/{sid}/questions/{second}").status_code == 404
