"""
Recorded Teaneck data.

A snapshot of Teaneck Township boards and meeting patterns from the IQM2
portal, used for development, demos and tests without network access.
"""

from models.records import Board, Meeting, MeetingDetails, MeetingDocument

IQM2_FILE_URL = "https://teanecktownnj.iqm2.com/Citizens/FileOpen.aspx"
YOUTUBE_URL = "https://www.youtube.com/watch"

# (id, name, jurisdiction)
_BOARDS = [
    ("township-council", "Township Council", "municipal"),
    ("planning-board", "Planning Board", "municipal"),
    ("zoning-board", "Zoning Board of Adjustment", "municipal"),
    ("board-of-education", "Board of Education", "boe"),
    ("environmental-commission", "Environmental Commission", "municipal"),
    ("library-board", "Library Board of Trustees", "municipal"),
    ("rent-board", "Rent Stabilization Board", "municipal"),
    ("historic-preservation", "Historic Preservation Commission", "municipal"),
]

STUB_BOARDS: list[Board] = [
    Board(id=board_id, name=name, jurisdiction=jurisdiction)
    for board_id, name, jurisdiction in _BOARDS
]

_BOARD_NAMES = {board.id: board.name for board in STUB_BOARDS}

# (id, board id, date), newest first per board
_MEETINGS = [
    ("tc-2024-12-10", "township-council", "2024-12-10"),
    ("tc-2024-11-26", "township-council", "2024-11-26"),
    ("tc-2024-11-12", "township-council", "2024-11-12"),
    ("pb-2024-12-04", "planning-board", "2024-12-04"),
    ("pb-2024-11-20", "planning-board", "2024-11-20"),
    ("zb-2024-12-05", "zoning-board", "2024-12-05"),
    ("zb-2024-11-07", "zoning-board", "2024-11-07"),
    ("boe-2024-12-11", "board-of-education", "2024-12-11"),
    ("boe-2024-11-27", "board-of-education", "2024-11-27"),
    ("ec-2024-12-03", "environmental-commission", "2024-12-03"),
    ("lb-2024-12-09", "library-board", "2024-12-09"),
    ("rb-2024-11-18", "rent-board", "2024-11-18"),
]

STUB_MEETINGS: list[Meeting] = [
    Meeting(
        id=meeting_id,
        board_id=board_id,
        board_name=_BOARD_NAMES[board_id],
        date=date,
        title="Regular Meeting",
    )
    for meeting_id, board_id, date in _MEETINGS
]


def _agenda(file_id: int) -> MeetingDocument:
    return MeetingDocument(
        type="agenda", title="Meeting Agenda", url=f"{IQM2_FILE_URL}?Type=14&ID={file_id}"
    )


def _minutes(file_id: int) -> MeetingDocument:
    return MeetingDocument(
        type="minutes", title="Meeting Minutes", url=f"{IQM2_FILE_URL}?Type=12&ID={file_id}"
    )


def _video(video_id: str) -> MeetingDocument:
    return MeetingDocument(
        type="video", title="Video Recording", url=f"{YOUTUBE_URL}?v={video_id}"
    )


# meeting id -> (documents, video url)
_DETAILS = {
    "tc-2024-12-10": (
        [_agenda(2847), _minutes(2848), _video("dQw4w9WgXcQ")],
        f"{YOUTUBE_URL}?v=dQw4w9WgXcQ",
    ),
    "tc-2024-11-26": ([_agenda(2840), _minutes(2841)], f"{YOUTUBE_URL}?v=abc123"),
    "tc-2024-11-12": ([_agenda(2835)], None),
    "pb-2024-12-04": (
        [_agenda(2850), _video("planning123")],
        f"{YOUTUBE_URL}?v=planning123",
    ),
    "pb-2024-11-20": ([_agenda(2842), _minutes(2843)], None),
    "zb-2024-12-05": ([_agenda(2851)], None),
    "zb-2024-11-07": ([_agenda(2830), _minutes(2831)], None),
    "boe-2024-12-11": ([_agenda(2855), _video("boe123")], f"{YOUTUBE_URL}?v=boe123"),
    "boe-2024-11-27": ([_agenda(2844)], None),
    "ec-2024-12-03": ([_agenda(2849)], None),
    "lb-2024-12-09": ([_agenda(2853)], None),
    "rb-2024-11-18": ([_agenda(2838), _minutes(2839)], None),
}

STUB_MEETING_DETAILS: dict[str, MeetingDetails] = {
    meeting.id: MeetingDetails(
        **meeting.model_dump(),
        documents=_DETAILS[meeting.id][0],
        video_url=_DETAILS[meeting.id][1],
    )
    for meeting in STUB_MEETINGS
}
