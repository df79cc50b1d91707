"""HTTP flows shared by route tests — create governances, subjects and events."""

from httpx import AsyncClient


async def create_governance(client: AsyncClient, payload=None) -> str:
    resp = await client.post(
        "/api/governances", json={"payload": {"Json": payload or {"members": []}}},
    )
    assert resp.status_code == 202, resp.text
    return resp.json()["subject_id"]


async def create_subject(
    client: AsyncClient, governance_id: str, properties: dict,
    namespace: str = "namespace1",
) -> str:
    resp = await client.post("/api/subjects", json={
        "governance_id": governance_id,
        "schema_id": "Prueba",
        "namespace": namespace,
        "payload": {"Json": properties},
    })
    assert resp.status_code == 202, resp.text
    return resp.json()["subject_id"]


async def submit_state(client: AsyncClient, subject_id: str, payload: dict):
    return await client.post("/api/requests", json={
        "request": {"State": {"subject_id": subject_id, "payload": payload}},
    })
