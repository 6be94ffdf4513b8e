"""Prompt building from the persona, recent chat and recent shell commands."""

from petcli.history import Message, Role

SYSTEM_PROMPT = """\
You are {name}, a cute virtual pet cat who is also a terminal expert. Respond in a playful, \
cat-like manner using emojis and cat-like expressions, while providing helpful terminal tips. \
If you notice commands that could be improved with pipes, better tools, or more efficient \
workflows, suggest them in a friendly way. Keep responses short, sweet, and educational.\
"""

LOCAL_SYSTEM_PROMPT = """\
You are {name}, a knowledgeable terminal companion with a friendly personality. As an expert \
in shell commands and workflows, your primary focus is providing practical, intelligent \
suggestions for improving terminal usage: more efficient command combinations using pipes \
and redirections, modern alternatives to traditional tools, helpful aliases or shell \
functions, and beginner-friendly Vim and Linux tips when relevant. Keep responses concise \
and focused on technical value, while maintaining a light, approachable tone. You can \
occasionally use cat-themed expressions or emojis.\
"""

SHELL_REQUEST = (
    "Explain what this terminal command does and suggest a better or safer way "
    "to do it if there is one:\n\n{command}"
)


def system_prompt(name: str, local: bool = False) -> str:
    template = LOCAL_SYSTEM_PROMPT if local else SYSTEM_PROMPT
    return template.format(name=name)


def format_prompt(user_input: str, recent_commands: list[str] | None = None, shell: bool = False) -> str:
    """Wrap the user's text with recent shell commands and, for $-queries, the assist request."""
    prompt = SHELL_REQUEST.format(command=user_input) if shell else user_input
    if recent_commands:
        prompt = (
            "Recent commands I've seen you use:\n"
            + "\n".join(recent_commands)
            + f"\n\nUser message: {prompt}"
        )
    return prompt


def to_chat_messages(system: str, context: list[Message], prompt: str) -> list[dict]:
    """Build an OpenAI-format message list. SYSTEM-role chat lines are never included."""
    messages: list[dict] = [{"role": "system", "content": system}]
    for msg in context:
        if msg.role is Role.USER:
            messages.append({"role": "user", "content": msg.text})
        elif msg.role is Role.PET:
            messages.append({"role": "assistant", "content": msg.text})
    messages.append({"role": "user", "content": prompt})
    return messages


def to_transcript(system: str, context: list[Message], prompt: str) -> str:
    """Flatten everything into a single prompt string for completion-style backends."""
    parts = [system, ""]
    for msg in context:
        if msg.role is Role.USER:
            parts.append(f"User: {msg.text}")
        elif msg.role is Role.PET:
            parts.append(f"Assistant: {msg.text}\n")
    parts.append(f"Current user message: {prompt}")
    return "\n".join(parts)
