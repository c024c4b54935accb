import logging
import sys
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, EmailStr

logging.basicConfig(stream=sys.stdout, level=logging.INFO, format="%(asctime)sZ %(levelname)s %(message)s")

app = FastAPI(title="Email Service Mock", version="1.0.0")


class SendEmail(BaseModel):
    sender_email: EmailStr
    recipient_email: EmailStr
    template_id: int
    params: dict[str, Any]


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/email/v1/send")
async def send(payload: SendEmail) -> dict:
    # the OTP is printed so it can be copied from `docker compose logs`
    logging.info(
        "EMAIL-MOCK send from=%s to=%s template=%s params=%r",
        payload.sender_email,
        payload.recipient_email,
        payload.template_id,
        payload.params,
    )
    return {"error": 0, "error_msg": "Email has been queued", "data": None}
