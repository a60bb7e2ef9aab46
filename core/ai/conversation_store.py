"""Conversation Store - bounded in-memory chat histories."""
import logging
import threading
from collections import OrderedDict
from typing import Dict, List, Mapping, Optional

from core.llm.interfaces import Message
from core.llm.system_prompts import ASSISTANT_PERSONAS

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 1000
DEFAULT_MAX_HISTORY = 20
DEFAULT_PERSONA = "general"


class ConversationStore:
    """
    Keyed, bounded store of role-tagged message lists.

    A new conversation starts with a system message chosen by persona.
    Each history keeps its system message plus the most recent
    ``max_history - 1`` messages.

    When a new key would exceed ``max_entries``, the first-inserted key is
    evicted. This is insertion order, not LRU: reading or appending to a
    conversation does not refresh its position.

    The lock only covers map mutation. It is never held while a completion
    is in flight, so concurrent turns on the same conversation both see the
    pre-turn history and their appends land in completion order.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        max_history: int = DEFAULT_MAX_HISTORY,
        personas: Optional[Mapping[str, str]] = None,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if max_history < 2:
            raise ValueError("max_history must be at least 2 (system message + one turn)")

        self.max_entries = max_entries
        self.max_history = max_history
        self.personas: Dict[str, str] = dict(personas if personas is not None else ASSISTANT_PERSONAS)
        if DEFAULT_PERSONA not in self.personas:
            raise ValueError(f"personas must define a '{DEFAULT_PERSONA}' entry")

        self._conversations: "OrderedDict[str, List[Message]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._conversations

    def system_message(self, persona: Optional[str]) -> Message:
        """System message that opens a conversation for the given persona."""
        content = self.personas.get(persona or DEFAULT_PERSONA, self.personas[DEFAULT_PERSONA])
        return {"role": "system", "content": content}

    def history(self, conversation_id: str) -> List[Message]:
        """Copy of the stored history; empty if the conversation is unknown."""
        with self._lock:
            return [dict(m) for m in self._conversations.get(conversation_id, [])]

    def append(
        self,
        conversation_id: str,
        role: str,
        content: str,
        persona: Optional[str] = DEFAULT_PERSONA,
    ) -> List[Message]:
        """Append a message and return a copy of the resulting history.

        ``persona`` only matters when the conversation is new.
        """
        with self._lock:
            history = self._conversations.get(conversation_id)
            if history is None:
                self._make_room()
                history = [self.system_message(persona)]
                self._conversations[conversation_id] = history

            history.append({"role": role, "content": content})

            if len(history) > self.max_history:
                history[:] = [history[0]] + history[-(self.max_history - 1):]

            return [dict(m) for m in history]

    def _make_room(self) -> None:
        while len(self._conversations) >= self.max_entries:
            evicted, _ = self._conversations.popitem(last=False)
            logger.debug(f"Conversation store full ({self.max_entries}); evicted {evicted}")

    def clear(self, conversation_id: str) -> None:
        """Forget one conversation. Unknown ids are ignored."""
        with self._lock:
            self._conversations.pop(conversation_id, None)

    def clear_all(self) -> None:
        with self._lock:
            self._conversations.clear()
