"""
Integration tests for the FAQ document and its intake/approval workflow.

Verifies:
- Item add/replace/update/delete through the API
- Unknown ids: update is 404 with nothing written, delete is a no-op
- Approving a submission turns each field into an FAQ item and removes it
"""

import uuid

import pytest

API = "/api/v1/collage"


async def add_item(client, headers, college_id, question, answer="Answer"):
    response = await client.post(
        f"{API}/{college_id}/faq/items",
        json={"question": question, "answer": answer},
        headers=headers,
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
async def intake_form(client, admin_headers, college):
    """A form with two question fields, F1 and F2."""
    form = (await client.post(
        "/api/v1/forms/form-sections/create",
        json={"title": "Ask us", "collegeId": str(college.id)},
        headers=admin_headers,
    )).json()
    fields = []
    for order, label in enumerate(["First question", "Second question"]):
        fields.append((await client.post(
            "/api/v1/forms/form-feilds/create",
            json={
                "label": label,
                "type": "TEXTAREA",
                "formSectionId": form["id"],
                "order": order,
                "validation": {"FAQ": True},
            },
            headers=admin_headers,
        )).json())
    return form, fields


class TestFaqDocument:

    async def test_default_faq(self, client, college):
        response = await client.get(f"{API}/{college.id}/faq")
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Frequently Asked Questions"
        assert body["items"] == []

    async def test_add_sets_order_to_prior_count(self, client, admin_headers, college):
        await add_item(client, admin_headers, college.id, "One?")
        await add_item(client, admin_headers, college.id, "Two?")
        faq = await add_item(client, admin_headers, college.id, "Three?")
        assert faq["items"][-1]["order"] == 2

    async def test_replace_round_trips(self, client, admin_headers, college):
        payload = {
            "title": "Admissions",
            "description": "Before you apply",
            "items": [
                {"question": "Deadline?", "answer": "March"},
                {"question": "Fee?", "answer": "None"},
            ],
        }
        response = await client.put(f"{API}/{college.id}/faq", json=payload, headers=admin_headers)
        assert response.status_code == 200

        faq = (await client.get(f"{API}/{college.id}/faq")).json()
        assert faq["title"] == "Admissions"
        assert faq["description"] == "Before you apply"
        assert [(i["question"], i["answer"]) for i in faq["items"]] == [
            ("Deadline?", "March"),
            ("Fee?", "None"),
        ]

    async def test_update_unknown_item_is_404_and_unchanged(self, client, admin_headers, college):
        before = await add_item(client, admin_headers, college.id, "Q?")

        response = await client.put(
            f"{API}/{college.id}/faq/items/faq_0_missing00",
            json={"answer": "changed"},
            headers=admin_headers,
        )
        assert response.status_code == 404
        assert (await client.get(f"{API}/{college.id}/faq")).json() == before

    async def test_delete_unknown_item_changes_nothing(self, client, admin_headers, college):
        before = await add_item(client, admin_headers, college.id, "Q?")

        response = await client.delete(
            f"{API}/{college.id}/faq/items/faq_0_missing00", headers=admin_headers
        )
        assert response.status_code == 200
        after = response.json()
        assert len(after["items"]) == 1
        assert after["lastUpdated"] == before["lastUpdated"]

    async def test_import_rejects_incomplete_batch(self, client, admin_headers, college):
        response = await client.post(
            f"{API}/{college.id}/faq/import",
            json={"items": [{"question": "Fine?", "answer": "Yes"}, {"question": "No answer?"}]},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert (await client.get(f"{API}/{college.id}/faq")).json()["items"] == []

    async def test_unknown_college_is_404(self, client):
        response = await client.get(f"{API}/{uuid.uuid4()}/faq")
        assert response.status_code == 404

    async def test_mutation_requires_admin(self, client, guest_headers, college):
        response = await client.post(
            f"{API}/{college.id}/faq/items",
            json={"question": "Q?", "answer": "A"},
            headers=guest_headers,
        )
        assert response.status_code == 403


class TestIntakeWorkflow:

    async def test_tagged_form_is_listed(self, client, college, intake_form):
        form, _ = intake_form
        listed = (await client.get(f"{API}/{college.id}/faq/forms")).json()
        assert [f["id"] for f in listed] == [form["id"]]

        by_slug = await client.get(f"{API}/slug/{college.slug}/faq/forms")
        assert by_slug.status_code == 200

    async def test_college_without_intake_forms(self, client, college):
        response = await client.get(f"{API}/slug/{college.slug}/faq/forms")
        assert response.status_code == 404
        assert response.json()["error"] == "No FAQ forms found"

    async def test_generate_form(self, client, admin_headers, college):
        response = await client.post(
            f"{API}/{college.id}/faq/generate-form",
            json={"collegeName": "Engineering", "questions": ["What would you like to know?"]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        form = response.json()["form"]
        assert form["fields"][0]["validation"]["FAQ"] is True
        listed = (await client.get(f"{API}/{college.id}/faq/forms")).json()
        assert [f["id"] for f in listed] == [form["id"]]

    async def test_approval_turns_fields_into_items(self, client, admin_headers, college, intake_form):
        form, (f1, f2) = intake_form
        submission = (await client.post(
            f"/api/v1/forms/{form['id']}/submit",
            json={
                "data": {f1["id"]: "Q1 text", f2["id"]: "Q2 text"},
                "collegeId": str(college.id),
            },
        )).json()

        pending = (await client.get(
            f"{API}/{college.id}/faq/submissions/count", headers=admin_headers
        )).json()
        assert pending["count"] == 1

        response = await client.put(
            f"{API}/{college.id}/faq/submissions/{submission['id']}",
            json={"action": "approve", "answers": {f1["id"]: "A1", f2["id"]: "A2"}},
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "FAQ items added successfully"
        assert [(i["question"], i["answer"]) for i in body["faq"]["items"]] == [
            ("Q1 text", "A1"),
            ("Q2 text", "A2"),
        ]

        remaining = await client.get(
            f"/api/v1/forms/form-submissions/{submission['id']}", headers=admin_headers
        )
        assert remaining.status_code == 404

    async def test_reject_deletes_without_items(self, client, admin_headers, college, intake_form):
        form, (f1, _) = intake_form
        submission = (await client.post(
            f"/api/v1/forms/{form['id']}/submit",
            json={"data": {f1["id"]: "Spam?"}, "collegeId": str(college.id)},
        )).json()

        response = await client.put(
            f"{API}/{college.id}/faq/submissions/{submission['id']}",
            json={"action": "reject"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Submission rejected and deleted"}
        assert (await client.get(f"{API}/{college.id}/faq")).json()["items"] == []

    async def test_unknown_action(self, client, admin_headers, college):
        response = await client.put(
            f"{API}/{college.id}/faq/submissions/{uuid.uuid4()}",
            json={"action": "archive"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    async def test_submission_for_another_college_is_not_counted(
        self, client, admin_headers, college, other_college, intake_form
    ):
        form, (f1, _) = intake_form
        response = await client.post(
            f"/api/v1/forms/{form['id']}/submit",
            json={"data": {f1["id"]: "Elsewhere?"}, "collegeId": str(other_college.id)},
        )
        assert response.status_code == 201

        for college_id in (college.id, other_college.id):
            count = (await client.get(
                f"{API}/{college_id}/faq/submissions/count", headers=admin_headers
            )).json()
            assert count["count"] == 0
            listing = (await client.get(
                f"{API}/{college_id}/faq/submissions", headers=admin_headers
            )).json()
            assert listing == []


class TestMobileCatalog:

    async def test_lists_every_college_with_its_intake_forms(
        self, client, admin_headers, college, other_college, intake_form
    ):
        form, fields = intake_form
        await client.post(
            "/api/v1/forms/form-sections/create",
            json={"title": "Contact", "collegeId": str(college.id)},
            headers=admin_headers,
        )

        response = await client.get("/api/v1/mobile/forms/fqa")
        assert response.status_code == 200
        catalog = response.json()
        assert [c["slug"] for c in catalog] == ["eng", "med"]
        assert [f["id"] for f in catalog[0]["forms"]] == [form["id"]]
        assert len(catalog[0]["forms"][0]["fields"]) == len(fields)
        assert catalog[1]["forms"] == []

    async def test_empty_catalog(self, client):
        response = await client.get("/api/v1/mobile/forms/fqa")
        assert response.status_code == 200
        assert response.json() == []
