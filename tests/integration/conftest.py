import base64
from datetime import datetime, timezone
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, Header, HTTPException, Response
from pydantic import BaseModel

from secrets_console.api.client import ApiClient
from secrets_console.api.gateway import SecretsGateway
from secrets_console.config import ClientConfig

VALID_TOKEN = "integration-token"


class SecretBody(BaseModel):
    name: str
    description: str
    secretValue: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _seal(value: str) -> str:
    return base64.b64encode(value[::-1].encode()).decode()


def create_fake_server() -> FastAPI:
    """Secrets API double storing records the way the production backend shapes them."""

    app = FastAPI()
    records: dict[str, dict] = {}

    def authorize(authorization: str | None = Header(default=None)) -> None:
        if authorization != f"Bearer {VALID_TOKEN}":
            raise HTTPException(status_code=401, detail="Invalid token")

    def public(record: dict) -> dict:
        return {key: value for key, value in record.items() if key != "plaintext"}

    def lookup(secret_id: str) -> dict:
        if secret_id not in records:
            raise HTTPException(status_code=404, detail="Secret not found")
        return records[secret_id]

    @app.get("/api/secrets", dependencies=[Depends(authorize)])
    def list_secrets() -> list[dict]:
        return [public(record) for record in records.values()]

    @app.post("/api/secrets", status_code=201, dependencies=[Depends(authorize)])
    def create_secret(body: SecretBody) -> dict:
        timestamp = _now()
        record = {
            "_id": uuid4().hex,
            "name": body.name,
            "description": body.description,
            "encrypted": _seal(body.secretValue),
            "iv": uuid4().hex[:16],
            "createdAt": timestamp,
            "updatedAt": timestamp,
            "__v": 0,
            "plaintext": body.secretValue,
        }
        records[record["_id"]] = record
        return public(record)

    @app.get("/api/secrets/{secret_id}/decrypted", dependencies=[Depends(authorize)])
    def decrypted(secret_id: str) -> dict:
        return {"decryptedValue": lookup(secret_id)["plaintext"]}

    @app.put("/api/secrets/{secret_id}", dependencies=[Depends(authorize)])
    def update_secret(secret_id: str, body: SecretBody) -> dict:
        record = lookup(secret_id)
        record.update(
            name=body.name,
            description=body.description,
            encrypted=_seal(body.secretValue),
            plaintext=body.secretValue,
            updatedAt=_now(),
        )
        record["__v"] += 1
        return public(record)

    @app.delete("/api/secrets/{secret_id}", dependencies=[Depends(authorize)])
    def delete_secret(secret_id: str) -> Response:
        lookup(secret_id)
        del records[secret_id]
        return Response(status_code=204)

    return app


@pytest.fixture
def fake_server():
    return create_fake_server()


@pytest_asyncio.fixture
async def api_client(fake_server):
    config = ClientConfig(base_url="http://testserver")
    client = ApiClient(config, transport=httpx.ASGITransport(app=fake_server))
    yield client
    await client.close()


@pytest.fixture
def gateway(api_client):
    return SecretsGateway(api_client)


@pytest.fixture
def valid_token():
    async def provide() -> str:
        return VALID_TOKEN

    return provide
