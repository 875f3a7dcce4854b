"""KYC submission, review and audit over HTTP."""

DOCUMENT = {
    "document_type": "nin",
    "document_number": "12345678901",
    "full_name": "Jane Doe",
    "date_of_birth": "1990-01-01",
}


async def test_submit_and_read_own_status(async_client, register_and_login):
    user_id, headers = await register_and_login("patient")

    r = await async_client.get("/kyc/me", headers=headers)
    assert r.status_code == 200
    assert r.json() is None

    r = await async_client.post("/kyc", json=DOCUMENT, headers=headers)
    assert r.status_code == 201
    body = r.json()
    assert body["user_id"] == user_id
    assert body["verification_status"] == "pending"
    assert body["document_number"] == "1234****8901"

    r = await async_client.get("/kyc/me", headers=headers)
    assert r.json()["document_number"] == "1234****8901"


async def test_second_submission_conflicts(async_client, register_and_login):
    _, headers = await register_and_login("patient")
    assert (await async_client.post("/kyc", json=DOCUMENT, headers=headers)).status_code == 201

    r = await async_client.post("/kyc", json={**DOCUMENT, "document_type": "passport", "document_number": "A12345678"}, headers=headers)
    assert r.status_code == 409
    assert r.json()["code"] == "AlreadySubmitted"


async def test_invalid_document_reports_field(async_client, register_and_login):
    _, headers = await register_and_login("patient")
    r = await async_client.post("/kyc", json={**DOCUMENT, "document_number": "1234567890"}, headers=headers)
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "InvalidDocumentNumber"
    assert body["field"] == "document_number"


async def test_other_principal_cannot_read_status(async_client, register_and_login, admin, auth_headers):
    owner_id, owner_headers = await register_and_login("patient")
    await async_client.post("/kyc", json=DOCUMENT, headers=owner_headers)
    _, stranger_headers = await register_and_login("patient")

    r = await async_client.get(f"/kyc/users/{owner_id}", headers=stranger_headers)
    assert r.status_code == 403
    assert "12345678901" not in r.text

    r = await async_client.get(f"/kyc/users/{owner_id}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["document_number"] == "12345678901"


async def test_admin_rejects_with_reason_and_audits(async_client, register_and_login, admin, auth_headers):
    owner_id, owner_headers = await register_and_login("patient")
    kyc_id = (await async_client.post("/kyc", json=DOCUMENT, headers=owner_headers)).json()["id"]
    admin_headers = auth_headers(admin)

    r = await async_client.get("/admin/pending-kyc", headers=admin_headers)
    rows = [row for row in r.json() if row["id"] == kyc_id]
    assert rows and rows[0]["document_number"] == "12345678901"
    assert rows[0]["user_email"].endswith("@example.com")

    r = await async_client.post(f"/admin/kyc/{kyc_id}/reject", json={"reason": ""}, headers=admin_headers)
    assert r.status_code == 422
    assert r.json()["code"] == "InvalidRejectionReason"

    r = await async_client.post(
        f"/admin/kyc/{kyc_id}/reject",
        json={"reason": "document illegible"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["verification_status"] == "rejected"
    assert r.json()["rejection_reason"] == "document illegible"

    r = await async_client.post(f"/admin/kyc/{kyc_id}/verify", headers=admin_headers)
    assert r.status_code == 409
    assert r.json()["code"] == "InvalidTransition"

    r = await async_client.get(f"/admin/kyc/{kyc_id}/audit", headers=admin_headers)
    assert r.status_code == 200
    trail = r.json()
    assert trail["chain"]["valid"] is True
    assert [(e["action"], e["outcome"]) for e in trail["entries"]] == [
        ("reject", "success"),
        ("verify", "invalid_transition"),
    ]

    r = await async_client.get("/kyc/me", headers=owner_headers)
    assert r.json()["verification_status"] == "rejected"


async def test_admin_verifies(async_client, register_and_login, admin, auth_headers):
    _, owner_headers = await register_and_login("doctor")
    kyc_id = (await async_client.post("/kyc", json=DOCUMENT, headers=owner_headers)).json()["id"]

    r = await async_client.post(f"/admin/kyc/{kyc_id}/verify", headers=auth_headers(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["verification_status"] == "verified"
    assert body["verified_by"] == admin.id
    assert body["verified_at"] is not None


async def test_patient_cannot_verify(async_client, register_and_login):
    _, headers = await register_and_login("patient")
    kyc_id = (await async_client.post("/kyc", json=DOCUMENT, headers=headers)).json()["id"]

    r = await async_client.post(f"/admin/kyc/{kyc_id}/verify", headers=headers)
    assert r.status_code == 403
    assert r.json()["code"] == "WrongRole"


async def test_health(async_client):
    r = await async_client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


async def test_reject_without_body_needs_reason(async_client, register_and_login, admin, auth_headers):
    _, owner_headers = await register_and_login("patient")
    kyc_id = (await async_client.post("/kyc", json=DOCUMENT, headers=owner_headers)).json()["id"]

    r = await async_client.post(f"/admin/kyc/{kyc_id}/reject", headers=auth_headers(admin))
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "InvalidRejectionReason"
    assert body["field"] == "reason"


async def test_malformed_body_reports_code_and_field(async_client, register_and_login):
    _, headers = await register_and_login("patient")

    r = await async_client.post("/kyc", json={**DOCUMENT, "date_of_birth": 19900101}, headers=headers)
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "InvalidDateOfBirth"
    assert body["field"] == "date_of_birth"
    assert isinstance(body["detail"], str)
    assert "19900101" not in r.text

    payload = {k: v for k, v in DOCUMENT.items() if k != "document_type"}
    r = await async_client.post("/kyc", json=payload, headers=headers)
    assert r.status_code == 422
    assert r.json()["code"] == "InvalidDocumentType"
    assert r.json()["field"] == "document_type"

    r = await async_client.get("/kyc/me", headers=headers)
    assert r.json() is None
