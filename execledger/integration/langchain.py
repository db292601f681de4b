# execledger/integration/langchain.py
from typing import Any, Dict, List, Optional

from langchain_core.callbacks import BaseCallbackHandler

from execledger.integration.auditor import ChainAuditor

EVENT_TYPES = {
    "human": "instruction_received",
    "ai": "agent_response",
    "tool": "tool_result",
    "system": "system_prompt",
}


class LedgerCallbackHandler(BaseCallbackHandler):
    """LangChain / LangGraph callback that records chat traffic into a ChainAuditor."""

    def __init__(self, auditor: ChainAuditor, agent_names: Optional[Dict[str, str]] = None):
        self.auditor = auditor
        # message type → actor identity recorded on the event
        self.agent_names = agent_names or {}
        self._seen = set()

    def on_chat_model_start(self, serialized: Dict, messages: List[List[Any]], **kwargs):
        for msg_list in messages:
            for msg in msg_list:
                self._record_message(msg)

    def on_llm_end(self, response: Any, **kwargs):
        for gen in getattr(response, "generations", None) or []:
            for g in gen:
                if hasattr(g, "message"):
                    self._record_message(g.message)

    def on_tool_end(self, output: Any, **kwargs):
        name = kwargs.get("name") or self.agent_names.get("tool", "tool")
        self.auditor.log("tool_result", name, {"output": str(output)})

    def _record_message(self, msg: Any):
        # chat history is replayed on every model call; record each message once
        key = (msg.type, str(msg.content))
        if key in self._seen:
            return
        self._seen.add(key)

        event_type = EVENT_TYPES.get(msg.type, "message_recorded")
        agent_name = self.agent_names.get(msg.type, msg.type)
        self.auditor.log(event_type, agent_name, {"content": msg.content})
