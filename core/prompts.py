"""Prompt construction for meeting question answering."""

from typing import Sequence

from models.records import Board, Meeting

__all__ = ["MAX_PROMPT_MEETINGS", "build_meeting_qa_prompt"]

MAX_PROMPT_MEETINGS = 20

QA_INSTRUCTIONS = """INSTRUCTIONS:
- Answer the question based ONLY on the provided data above
- If you don't have enough information to answer fully, say so clearly
- Keep answers concise but informative (2-4 paragraphs)
- Include relevant dates, board names, and document links when applicable
- Format your answer in markdown for readability
- If the user asks about upcoming meetings or future events, note that you only have access to historical data"""


def _format_boards(boards: Sequence[Board]) -> str:
    if not boards:
        return "No board data available."
    return "\n".join(f"{i}. {b.name} (ID: {b.id})" for i, b in enumerate(boards, 1))


def _format_meetings(meetings: Sequence[Meeting]) -> str:
    if not meetings:
        return "No meeting data available."
    lines = []
    for i, m in enumerate(meetings[:MAX_PROMPT_MEETINGS], 1):
        board = f" (Board ID: {m.board_id})" if m.board_id else ""
        lines.append(f"{i}. {m.date}: {m.title}{board}")
    return "\n".join(lines)


def build_meeting_qa_prompt(
    question: str,
    boards: Sequence[Board],
    meetings: Sequence[Meeting],
    municipality_name: str = "Teaneck Township",
) -> str:
    """
    Build the single-shot prompt for answering a question from portal data.

    Only the first MAX_PROMPT_MEETINGS meetings are listed.
    """
    sections = [
        f"You are an assistant for {municipality_name} government meetings. "
        "Answer questions about meetings, boards, committees, and government "
        "activities based on the provided data.",
        "AVAILABLE DATA:",
        f"Boards/Committees:\n{_format_boards(boards)}",
        f"Recent Meetings:\n{_format_meetings(meetings)}",
        f"USER QUESTION: {question}",
        QA_INSTRUCTIONS,
        "ANSWER:",
    ]
    return "\n\n".join(sections)
