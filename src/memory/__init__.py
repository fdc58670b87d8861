# Memory - Conversation history for chat mode
from memory.conversation_memory import ConversationMemory

__all__ = ["ConversationMemory"]
