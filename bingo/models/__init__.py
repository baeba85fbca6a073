from bingo.models.user import User
from bingo.models.coach import Coach
from bingo.models.coach_match import CoachMatch
from bingo.models.conversation import Conversation
from bingo.models.message import Message
from bingo.models.assessment import Assessment
from bingo.models.document import Document

__all__ = [
    "User",
    "Coach",
    "CoachMatch",
    "Conversation",
    "Message",
    "Assessment",
    "Document",
]
