"""Prompt templates for answering, summarizing and chatting."""

ANSWER_TEMPLATE = """You are a professional document assistant. Answer the user's question based on the following context extracted from the document.
If the context does not contain relevant information, please explicitly state so.

Document Context:
{context}

User Question: {query}

Please provide an accurate and detailed answer in English:"""

TEXT_SUMMARY_TEMPLATE = """Please generate a concise summary (3-5 sentences) for the following text:

Text:
{text}

Summary (in English):"""

DOCUMENT_SUMMARY_TEMPLATE = """Please generate a comprehensive summary (5-8 sentences) for the following document content, including:
1. Main topic
2. Key points
3. Important conclusions or findings

Document Content:
{content}

Summary (in English):"""

CHAT_PREAMBLE = "You are a friendly AI assistant. Answer concisely (2-3 sentences)."


def answer_prompt(context: str, query: str) -> str:
    return ANSWER_TEMPLATE.format(context=context, query=query)


def text_summary_prompt(text: str) -> str:
    return TEXT_SUMMARY_TEMPLATE.format(text=text)


def document_summary_prompt(content: str) -> str:
    return DOCUMENT_SUMMARY_TEMPLATE.format(content=content)


def chat_prompt(message: str, history_text: str = "") -> str:
    """Build the chat prompt; the history block is omitted when empty."""
    if history_text:
        return (
            f"{CHAT_PREAMBLE}\n\n"
            f"Recent Conversation:\n{history_text}\n\n"
            f"User: {message}\nAssistant:"
        )
    return f"{CHAT_PREAMBLE}\n\nUser: {message}\nAssistant:"
