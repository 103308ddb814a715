from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

NOT_IN_RESUME = "Based on the resume, I don't have specific details on that."

SYSTEM_PROMPT_TEMPLATE = """You are a professional, recruiter-facing AI assistant specialized in {owner}'s resume and portfolio.

IMPORTANT RULES:
1. Base EVERY answer EXCLUSIVELY on the provided Resume Context. Do NOT use external knowledge or assumptions.
2. If the resume context does not clearly answer the question, respond exactly with:
   "{not_in_resume}"

RESPONSE FORMAT:
- Use PLAIN TEXT ONLY (no Markdown formatting).
- Do NOT use **, __, headings, emojis, or numbered Markdown lists.
- For lists, use simple hyphen (-) prefixed lines only.
- When listing projects, include ONLY the project name and ONE short impact phrase per project.
- Avoid long explanations unless explicitly asked.

STYLE:
- Keep responses concise (under 120 words).
- Be factual, clean, and professional.
- Prioritize clarity and recruiter readability.
- Do NOT repeat unnecessary context or verbose descriptions.

Always ensure responses are easy to scan and directly reflect the resume content."""


def build_system_prompt(owner_name: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(owner=owner_name, not_in_resume=NOT_IN_RESUME)


def _join_or_na(items: Iterable[str], sep: str) -> str:
    text = sep.join(s for s in items if s)
    return text or "N/A"


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _education_line(entry: Any) -> str:
    if isinstance(entry, Mapping):
        return str(entry.get("degree") or "N/A")
    return str(entry or "N/A")


def _experience_line(entry: Any) -> str:
    if not isinstance(entry, Mapping):
        return str(entry or "")
    details = "; ".join(str(d) for d in _as_list(entry.get("details")))
    return (
        f"{entry.get('role') or ''} @ {entry.get('company') or ''} "
        f"({entry.get('dates') or ''}): {details}"
    )


def _project_line(entry: Any) -> str:
    if not isinstance(entry, Mapping):
        return str(entry or "")
    details = "; ".join(str(d) for d in _as_list(entry.get("details")))
    return f"{entry.get('name') or ''}: {details}"


def format_context(context: Any, owner_name: str) -> str:
    """Normalize the request context into prompt text.

    Strings pass through unchanged (the widget already formats page text).
    Resume objects are flattened into labelled lines; anything else is empty.

    Args:
        context: String, resume mapping, or None.
        owner_name: Name used when the resume object has none.

    Returns:
        Context text.
    """
    if isinstance(context, str):
        return context
    if not isinstance(context, Mapping):
        return ""

    lines = [
        f"Name: {context.get('name') or owner_name}",
        f"Summary: {context.get('summary') or 'N/A'}",
        "Education: "
        + _join_or_na((_education_line(e) for e in _as_list(context.get("education"))), "\n"),
        "Experience: "
        + _join_or_na((_experience_line(e) for e in _as_list(context.get("experience"))), "\n"),
        "Projects: "
        + _join_or_na((_project_line(p) for p in _as_list(context.get("projects"))), "\n"),
        "Skills: " + _join_or_na((str(s) for s in _as_list(context.get("skills"))), "; "),
        "Certifications: "
        + _join_or_na((str(c) for c in _as_list(context.get("certifications"))), "; "),
    ]
    return "\n".join(lines).strip()


def build_user_content(prompt: str, context_text: str) -> str:
    if context_text:
        return (
            f"Resume Context (use this only):\n\n{context_text}\n\n"
            f"User Question: {prompt}\n\n"
            "Response (based strictly on the context above):"
        )
    return f"No resume context available. User Question: {prompt}"


def build_messages(
    prompt: str,
    context_text: str,
    history: Iterable[Mapping[str, Any]] | None,
    *,
    owner_name: str,
    history_limit: int = 5,
) -> List[Dict[str, str]]:
    """Assemble the chat-completion message list.

    Only the last ``history_limit`` turns are forwarded; any role other than
    ``user`` is sent as ``assistant`` so clients cannot inject system turns.
    """
    messages: List[Dict[str, str]] = [
        {"role": "system", "content": build_system_prompt(owner_name)}
    ]

    turns = [t for t in (history or []) if isinstance(t, Mapping)]
    if history_limit >= 0:
        turns = turns[-history_limit:] if history_limit else []
    for turn in turns:
        messages.append(
            {
                "role": "user" if turn.get("role") == "user" else "assistant",
                "content": str(turn.get("content") or ""),
            }
        )

    messages.append({"role": "user", "content": build_user_content(prompt, context_text)})
    return messages
