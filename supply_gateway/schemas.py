from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from supply_gateway.workflow import OrderStatus


class LoginReq(BaseModel):
    username: str
    password: str


class TokenOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    token_type: str = Field("Bearer", alias="tokenType")
    expires_in_seconds: int = Field(0, ge=0, alias="expiresInSeconds")


class StatusUpdate(BaseModel):
    status: str


class SupplyOrder(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int
    item_name: str = Field(alias="itemName")
    quantity: int
    status: OrderStatus
    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class FailureEnvelope(BaseModel):
    error: str


FAILURE_RESPONSES = {
    400: {"model": FailureEnvelope, "description": "Rejected before reaching upstream"},
    502: {"model": FailureEnvelope, "description": "Upstream unreachable"},
}
