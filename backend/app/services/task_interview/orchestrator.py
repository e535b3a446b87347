"""Structured requests to the reasoning service with a single secondary retry."""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

import openai

from app.core.config import settings
from app.core.errors import (
    PlannerError,
    ResponseParseFailure,
    ServiceInvocationFailure,
)
from app.observability.metrics import log_metric
from app.observability.tracing import trace

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
# Model families that only accept the default temperature.
_FIXED_TEMPERATURE_RE = re.compile(r"gpt-5-nano", re.IGNORECASE)


@dataclass(frozen=True)
class ModelConfig:
    model: str
    temperature: float = 0.2


@dataclass
class StructuredRequest(Generic[T]):
    """Everything needed for one structured call, independent of the model used."""

    name: str
    description: str
    schema: Dict[str, Any]
    system_prompt: str
    user_prompt: str
    parse: Callable[[Any], T]
    temperature: Optional[float] = None
    trace_metadata: Optional[Dict[str, Any]] = None


@dataclass
class PlanRequestOutcome(Generic[T]):
    result: Optional[T]
    attempts: int
    model: Optional[str]
    failure: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None


class PlanRequestOrchestrator:
    """Issue a schema-constrained chat completion, retrying once on invocation errors.

    Parse and validation failures are not retried. ``request`` never raises a
    PlannerError; the caller inspects the outcome and falls back when it failed.
    """

    def __init__(self, client: Any, primary: ModelConfig, secondary: Optional[ModelConfig] = None) -> None:
        self._client = client
        self.primary = primary
        self.secondary = secondary if secondary and secondary.model and secondary.model != primary.model else None

    @classmethod
    def from_settings(cls) -> Optional["PlanRequestOrchestrator"]:
        api_key = settings.openai_api_key
        if not api_key:
            logger.warning("OPENAI_API_KEY missing; plans will use the fallback template.")
            return None
        primary = ModelConfig(model=settings.planner_model, temperature=settings.planner_temperature)
        secondary = None
        if settings.planner_fallback_model:
            secondary = ModelConfig(model=settings.planner_fallback_model, temperature=settings.planner_temperature)
        return cls(openai.OpenAI(api_key=api_key), primary, secondary)

    def request(self, structured: StructuredRequest[T]) -> PlanRequestOutcome[T]:
        configs: List[ModelConfig] = [self.primary]
        if self.secondary:
            configs.append(self.secondary)

        failure: Optional[str] = None
        attempts = 0
        for config in configs:
            attempts += 1
            if attempts > 1:
                log_metric("planner.retry.used", 1, {"request": structured.name, "model": config.model})
                logger.info("Retrying %s with secondary model %s", structured.name, config.model)
            try:
                result = self._attempt(config, structured)
            except ServiceInvocationFailure as exc:
                failure = exc.kind
                logger.warning("%s call to %s failed: %s", structured.name, config.model, exc)
                continue
            except PlannerError as exc:
                logger.warning("%s response from %s rejected: %s", structured.name, config.model, exc)
                return PlanRequestOutcome(result=None, attempts=attempts, model=config.model, failure=exc.kind)
            return PlanRequestOutcome(result=result, attempts=attempts, model=config.model)

        return PlanRequestOutcome(result=None, attempts=attempts, model=configs[-1].model, failure=failure)

    def _attempt(self, config: ModelConfig, structured: StructuredRequest[T]) -> T:
        params: Dict[str, Any] = {
            "model": config.model,
            "messages": [
                {"role": "system", "content": structured.system_prompt},
                {"role": "user", "content": structured.user_prompt},
            ],
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": structured.name,
                    "description": structured.description,
                    "schema": structured.schema,
                    "strict": True,
                },
            },
        }
        if supports_temperature(config.model):
            params["temperature"] = structured.temperature if structured.temperature is not None else config.temperature

        metadata = dict(structured.trace_metadata or {})
        metadata["model"] = config.model
        try:
            with trace(f"{structured.name}.request", metadata=metadata):
                completion = self._client.chat.completions.create(**params)
        except Exception as exc:
            raise ServiceInvocationFailure(f"{type(exc).__name__}: {exc}") from exc

        content = _message_content(completion)
        payload = parse_json_payload(content)
        return structured.parse(payload)


def supports_temperature(model: str) -> bool:
    return not _FIXED_TEMPERATURE_RE.search(model or "")


def parse_json_payload(content: str) -> Any:
    """Decode the service's text payload, tolerating a single ```json fence."""
    text = content.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ResponseParseFailure(f"Response is not valid JSON: {exc.msg} at position {exc.pos}") from exc


def _message_content(completion: Any) -> str:
    try:
        content = completion.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as exc:
        raise ServiceInvocationFailure("Completion carried no message") from exc
    if not content or not str(content).strip():
        raise ServiceInvocationFailure("No response content from the planning service")
    return str(content)
