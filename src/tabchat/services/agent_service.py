"""Agent use-case: ask the LLM, pull SQL out of its reply, optionally run it.

Every outcome, provider failures included, is an ``AgentResponse``.
"""
from __future__ import annotations

from tabchat.api.schemas.agent import AgentMode, AgentRequest, AgentResponse
from tabchat.domain.exceptions import LLMError
from tabchat.infra.db.store import TabularStore
from tabchat.llm.prompts import build_system_prompt
from tabchat.llm.protocol import LLMClient, Provider, build_client, pick_provider
from tabchat.logging import logger
from tabchat.services.query_service import QueryExecutor
from tabchat.sql.extract import extract_statement
from tabchat.sql.sanitize import strip_formatting

GREETINGS = ("hi", "hello", "hey", "greetings", "good morning", "good afternoon", "good evening")

GREETING_REPLY = (
    "Hello! I'm your analytics assistant. I can answer questions about the loaded CSV data "
    "by writing and running SQL for you. Try asking something like:\n"
    '- "What is the average order value?"\n'
    '- "Which product category has the highest sales?"\n'
    '- "Show me the top 10 cities by revenue"\n\n'
    "What would you like to know?"
)

NO_PROVIDER = "No provider configured. Set OPENROUTER_API_KEY or GEMINI_API_KEY."


def is_greeting(text: str) -> bool:
    text = text.lower().strip()
    return any(text == g or text.startswith(g + " ") for g in GREETINGS)


class AgentService:
    def __init__(
        self,
        store: TabularStore,
        *,
        llm_client: LLMClient | None = None,
        provider: Provider | None = None,
    ) -> None:
        self._store = store
        self._executor = QueryExecutor(store)
        self._llm_client = llm_client
        self._provider = provider or pick_provider()

    def send(self, payload: AgentRequest) -> AgentResponse:
        mode = payload.mode
        provider = self._provider.value
        last = payload.messages[-1].content if payload.messages else ""

        if is_greeting(last):
            return AgentResponse(ok=True, mode=mode, provider=provider, text=GREETING_REPLY)

        if self._llm_client is None and self._provider is Provider.NONE:
            return AgentResponse(ok=False, mode=mode, provider=provider, notice=NO_PROVIDER)

        system = build_system_prompt(
            self._store.describe(),
            sql_only=mode is AgentMode.SQL and not payload.execute,
        )
        try:
            client = self._llm_client or build_client(self._provider)
            content = client.complete(
                system=system,
                messages=[m.model_dump() for m in payload.messages],
            )
        except LLMError as exc:
            logger.warning(f"LLM call failed: {exc.message}")
            return AgentResponse(ok=False, mode=mode, provider=provider, notice=f"⚠️ {exc.message}")
        except Exception as exc:
            logger.exception(exc)
            return AgentResponse(ok=False, mode=mode, provider=provider, notice=f"⚠️ {exc}")

        response = AgentResponse(ok=True, mode=mode, provider=provider)
        extracted = extract_statement(content)
        sql = strip_formatting(extracted) if extracted else None

        if mode is AgentMode.SQL:
            response.sql = sql or content.strip()
            if payload.execute and sql:
                self._run(sql, payload.limit, response, "Execution failed")
            if response.rows is None and response.notice is None:
                response.notice = "SQL generated. Execution disabled or no database configured."
        else:
            response.text = content
            if sql:
                response.sql = sql
                self._run(sql, payload.limit, response, "SQL generated but execution failed")
        return response

    def _run(self, sql: str, limit: int | None, response: AgentResponse, prefix: str) -> None:
        result = self._executor.execute(sql, limit)
        if result.executed:
            response.fields = result.fields
            response.rows = result.rows
        else:
            response.notice = f"{prefix}: {result.error}"
