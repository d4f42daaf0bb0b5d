from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Inbound(BaseModel):
    model_config = ConfigDict(extra="ignore")


class JoinMessage(Inbound):
    type: Literal["join"]


class SkipMessage(Inbound):
    type: Literal["skip"]


class PingMessage(Inbound):
    type: Literal["ping"]


class OfferMessage(Inbound):
    type: Literal["signal.offer"]
    offer: Any
    room: str


class AnswerMessage(Inbound):
    type: Literal["signal.answer"]
    answer: Any
    room: str


class IceMessage(Inbound):
    type: Literal["signal.ice"]
    candidate: Any
    room: str


InboundMessage = Annotated[
    Union[JoinMessage, SkipMessage, PingMessage, OfferMessage, AnswerMessage, IceMessage],
    Field(discriminator="type"),
]
inbound_adapter = TypeAdapter(InboundMessage)


class HealthResponse(BaseModel):
    status: str
    sessions: int
    waiting: int
    rooms: int
    oldest_session_age: float
