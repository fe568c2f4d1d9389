from app.models.user import User
from app.models.match import Match, MatchParticipant
